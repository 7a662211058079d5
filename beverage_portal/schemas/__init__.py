from beverage_portal.schemas.restaurant import RestaurantCreate, RestaurantRead, RestaurantUpdate
from beverage_portal.schemas.product import ProductCreate, ProductRead, ProductUpdate
from beverage_portal.schemas.delivery_schedule import (
    ApplyTemplateRequest,
    ApplyTemplateResponse,
    DeliveryScheduleRead,
    DeliveryScheduleWrite,
    EligibleDatesResponse,
)
from beverage_portal.schemas.order import (
    DashboardStats,
    OrderCreate,
    OrderFilters,
    OrderItemRead,
    OrderLineCreate,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderSummary,
)
from beverage_portal.schemas.report import ProductStats, ReportSummary, RestaurantStats
from beverage_portal.schemas.email_settings import EmailSettingsRead, EmailSettingsUpdate

__all__ = [
    # Restaurant schemas
    "RestaurantCreate",
    "RestaurantRead",
    "RestaurantUpdate",
    # Product schemas
    "ProductCreate",
    "ProductRead",
    "ProductUpdate",
    # Delivery schedule schemas
    "ApplyTemplateRequest",
    "ApplyTemplateResponse",
    "DeliveryScheduleRead",
    "DeliveryScheduleWrite",
    "EligibleDatesResponse",
    # Order schemas
    "DashboardStats",
    "OrderCreate",
    "OrderFilters",
    "OrderItemRead",
    "OrderLineCreate",
    "OrderRead",
    "OrderStatus",
    "OrderStatusUpdate",
    "OrderSummary",
    # Report schemas
    "ProductStats",
    "ReportSummary",
    "RestaurantStats",
    # Email settings schemas
    "EmailSettingsRead",
    "EmailSettingsUpdate",
]
