from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt

from beverage_portal.services.delivery_eligibility import (
    DEFAULT_ALLOWED_WEEKDAYS,
    DEFAULT_MAX_LEAD_DAYS,
    DEFAULT_MIN_LEAD_DAYS,
    DeliveryScheduleConfig,
)


class DeliveryScheduleWrite(BaseModel):
    """
    Full replacement of a restaurant's delivery schedule.

    Invariants (lead bounds, weekday range) are enforced by
    DeliveryScheduleConfig so a bad save is reported, never clamped.
    """

    allowed_weekdays: List[StrictInt] = Field(
        default_factory=lambda: sorted(DEFAULT_ALLOWED_WEEKDAYS),
        description="0=Sunday, 6=Saturday",
    )
    min_lead_days: StrictInt = DEFAULT_MIN_LEAD_DAYS
    max_lead_days: StrictInt = DEFAULT_MAX_LEAD_DAYS
    blocked_dates: List[date] = Field(default_factory=list)
    notes: str = Field(default="", max_length=2000)
    is_active: bool = True

    def to_config(self, restaurant_id: UUID) -> DeliveryScheduleConfig:
        return DeliveryScheduleConfig(
            restaurant_id=restaurant_id,
            allowed_weekdays=frozenset(self.allowed_weekdays),
            min_lead_days=self.min_lead_days,
            max_lead_days=self.max_lead_days,
            blocked_dates=frozenset(self.blocked_dates),
            notes=self.notes,
            is_active=self.is_active,
        )


class DeliveryScheduleRead(BaseModel):
    """Schedule as seen by the admin and the order form."""

    restaurant_id: UUID
    allowed_weekdays: List[int]
    min_lead_days: int
    max_lead_days: int
    blocked_dates: List[str]
    notes: str
    is_active: bool
    is_default: bool = False

    @classmethod
    def from_config(
        cls, config: DeliveryScheduleConfig, is_default: bool = False
    ) -> "DeliveryScheduleRead":
        return cls(
            restaurant_id=config.restaurant_id,
            allowed_weekdays=config.sorted_weekdays(),
            min_lead_days=config.min_lead_days,
            max_lead_days=config.max_lead_days,
            blocked_dates=config.blocked_date_strings(),
            notes=config.notes,
            is_active=config.is_active,
            is_default=is_default,
        )


class EligibleDatesResponse(BaseModel):
    """Selectable delivery dates for a restaurant."""

    restaurant_id: UUID
    reference_date: date
    dates: List[str]
    available: bool
    earliest: Optional[str] = None


class ApplyTemplateRequest(BaseModel):
    """Copy one restaurant's schedule to others (all active ones when targets are omitted)."""

    source_restaurant_id: UUID
    target_restaurant_ids: Optional[List[UUID]] = None


class ApplyTemplateResponse(BaseModel):
    """Per-target result of a template application."""

    source_restaurant_id: UUID
    succeeded: List[UUID]
    failed: Dict[UUID, str]
    skipped: List[UUID]
    all_succeeded: bool
