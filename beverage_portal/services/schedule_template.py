"""Bulk copy of one restaurant's delivery schedule onto other restaurants."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol
from uuid import UUID

from sqlalchemy.exc import DBAPIError

from beverage_portal.services.delivery_eligibility import DeliveryScheduleConfig

logger = logging.getLogger(__name__)


class ScheduleWriter(Protocol):
    async def put_schedule(self, schedule: DeliveryScheduleConfig) -> None: ...


class RestaurantLister(Protocol):
    async def list_restaurant_ids(self, active_only: bool = True) -> List[UUID]: ...


@dataclass
class TemplateApplyResult:
    """Per-target outcome of a template application."""

    source_restaurant_id: Optional[UUID]
    succeeded: List[UUID] = field(default_factory=list)
    failed: Dict[UUID, str] = field(default_factory=dict)
    skipped: List[UUID] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class ScheduleTemplateApplicator:
    """
    Copies weekdays, lead bounds, blocked dates, notes and the active flag
    from a source schedule onto each target restaurant.

    Targets are written one at a time and independently: a failed write is
    recorded against its target and the remaining targets are still
    attempted. The source restaurant is skipped when it is listed among the
    targets.
    """

    def __init__(self, store: ScheduleWriter):
        self.store = store

    async def apply(
        self,
        source: DeliveryScheduleConfig,
        target_ids: Iterable[UUID],
    ) -> TemplateApplyResult:
        result = TemplateApplyResult(source_restaurant_id=source.restaurant_id)
        seen = set()

        for target_id in target_ids:
            if target_id in seen:
                continue
            seen.add(target_id)

            if target_id == source.restaurant_id:
                result.skipped.append(target_id)
                continue

            try:
                await self.store.put_schedule(source.with_restaurant(target_id))
            except Exception as e:
                logger.warning(
                    "Applying schedule template from %s to %s failed: %s",
                    source.restaurant_id,
                    target_id,
                    e,
                )
                result.failed[target_id] = _failure_message(e)
                continue

            result.succeeded.append(target_id)

        logger.info(
            "Schedule template from %s applied: %d succeeded, %d failed, %d skipped",
            source.restaurant_id,
            len(result.succeeded),
            len(result.failed),
            len(result.skipped),
        )
        return result

    async def apply_to_all(
        self,
        source: DeliveryScheduleConfig,
        directory: RestaurantLister,
    ) -> TemplateApplyResult:
        """Apply to every active restaurant in the directory."""
        target_ids = await directory.list_restaurant_ids(active_only=True)
        return await self.apply(source, target_ids)


def _failure_message(error: Exception) -> str:
    """Short reason for a failed target; driver errors drop the SQL and parameters."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        message = str(error.orig)
    else:
        message = str(error)
    return message or type(error).__name__
