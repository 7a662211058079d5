"""Persistence for delivery schedules and the restaurant directory."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.models.delivery_schedule import DeliverySchedule
from beverage_portal.models.restaurant import Restaurant
from beverage_portal.services.delivery_eligibility import (
    DeliveryScheduleConfig,
    InvalidScheduleConfig,
    default_schedule,
)

logger = logging.getLogger(__name__)


class ScheduleStore:
    """
    Reads and writes DeliverySchedule rows as validated configs.

    Rows are parsed through DeliveryScheduleConfig.from_record, so a
    malformed stored record surfaces as InvalidScheduleConfig here rather
    than inside the calculator.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_schedule(self, restaurant_id: UUID) -> Optional[DeliveryScheduleConfig]:
        """Stored schedule for a restaurant, active or not."""
        row = await self._get_row(restaurant_id)
        if row is None:
            return None
        return DeliveryScheduleConfig.from_record(row)

    async def get_effective_schedule(self, restaurant_id: UUID) -> DeliveryScheduleConfig:
        """Stored schedule when active, otherwise the default rules."""
        schedule = await self.get_schedule(restaurant_id)
        if schedule is None or not schedule.is_active:
            return default_schedule(restaurant_id)
        return schedule

    async def put_schedule(self, schedule: DeliveryScheduleConfig) -> None:
        """
        Replace the stored schedule for schedule.restaurant_id.

        Runs inside a savepoint so a failed write leaves the surrounding
        session usable for further writes.
        """
        if schedule.restaurant_id is None:
            raise InvalidScheduleConfig("schedule has no restaurant_id", field="restaurant_id")

        async with self.session.begin_nested():
            row = await self._get_row(schedule.restaurant_id)
            if row is None:
                row = DeliverySchedule(restaurant_id=schedule.restaurant_id)
                self.session.add(row)

            row.allowed_weekdays = schedule.sorted_weekdays()
            row.min_lead_days = schedule.min_lead_days
            row.max_lead_days = schedule.max_lead_days
            row.blocked_dates = schedule.blocked_date_strings()
            row.notes = schedule.notes
            row.is_active = schedule.is_active
            row.updated_at = datetime.utcnow()
            await self.session.flush()

        logger.info("Saved delivery schedule for restaurant %s", schedule.restaurant_id)

    async def list_schedules(self) -> List[DeliveryScheduleConfig]:
        result = await self.session.execute(select(DeliverySchedule))
        return [DeliveryScheduleConfig.from_record(row) for row in result.scalars().all()]

    async def _get_row(self, restaurant_id: UUID) -> Optional[DeliverySchedule]:
        result = await self.session.execute(
            select(DeliverySchedule).where(DeliverySchedule.restaurant_id == restaurant_id)
        )
        return result.scalar_one_or_none()


class RestaurantDirectory:
    """Read-only view of restaurant identifiers."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_restaurant_ids(self, active_only: bool = True) -> List[UUID]:
        stmt = select(Restaurant.id).order_by(Restaurant.name)
        if active_only:
            stmt = stmt.where(Restaurant.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def exists(self, restaurant_id: UUID) -> bool:
        result = await self.session.execute(
            select(Restaurant.id).where(Restaurant.id == restaurant_id)
        )
        return result.scalar_one_or_none() is not None
