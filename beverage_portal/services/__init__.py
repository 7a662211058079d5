# Business logic services
from beverage_portal.services.delivery_eligibility import (
    DeliveryScheduleConfig,
    InvalidScheduleConfig,
    compute_eligible_dates,
    default_schedule,
    is_eligible_delivery_date,
)
from beverage_portal.services.schedule_store import RestaurantDirectory, ScheduleStore
from beverage_portal.services.schedule_template import (
    ScheduleTemplateApplicator,
    TemplateApplyResult,
)
from beverage_portal.services.order_service import OrderService
from beverage_portal.services.report_service import ReportService

__all__ = [
    "DeliveryScheduleConfig",
    "InvalidScheduleConfig",
    "compute_eligible_dates",
    "default_schedule",
    "is_eligible_delivery_date",
    "RestaurantDirectory",
    "ScheduleStore",
    "ScheduleTemplateApplicator",
    "TemplateApplyResult",
    "OrderService",
    "ReportService",
]
