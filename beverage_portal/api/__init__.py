# API routes
from beverage_portal.api.restaurants import router as restaurants_router
from beverage_portal.api.products import router as products_router
from beverage_portal.api.delivery_schedules import router as delivery_schedules_router
from beverage_portal.api.orders import router as orders_router
from beverage_portal.api.reports import router as reports_router
from beverage_portal.api.email_settings import router as email_settings_router


__all__ = [
    "restaurants_router",
    "products_router",
    "delivery_schedules_router",
    "orders_router",
    "reports_router",
    "email_settings_router",
]
