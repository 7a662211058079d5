from beverage_portal.models.restaurant import Restaurant
from beverage_portal.models.product import Product
from beverage_portal.models.delivery_schedule import DeliverySchedule
from beverage_portal.models.order import Order, OrderItem
from beverage_portal.models.email_settings import EmailSettings

__all__ = [
    "Restaurant",
    "Product",
    "DeliverySchedule",
    "Order",
    "OrderItem",
    "EmailSettings",
]
