"""
REST API endpoints for delivery schedules and eligible delivery dates.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.api.dependencies import get_today
from beverage_portal.database import get_session
from beverage_portal.schemas.delivery_schedule import (
    ApplyTemplateRequest,
    ApplyTemplateResponse,
    DeliveryScheduleRead,
    DeliveryScheduleWrite,
    EligibleDatesResponse,
)
from beverage_portal.services.delivery_eligibility import (
    InvalidScheduleConfig,
    compute_eligible_dates,
    default_schedule,
)
from beverage_portal.services.schedule_store import RestaurantDirectory, ScheduleStore
from beverage_portal.services.schedule_template import ScheduleTemplateApplicator

router = APIRouter(prefix="/api/v1", tags=["delivery-schedules"])


def _invalid(e: InvalidScheduleConfig) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": e.message, "field": e.field})


async def _require_restaurant(session: AsyncSession, restaurant_id: UUID) -> None:
    if not await RestaurantDirectory(session).exists(restaurant_id):
        raise HTTPException(status_code=404, detail="Restaurant not found")


@router.get("/delivery-schedules", response_model=List[DeliveryScheduleRead])
async def list_delivery_schedules(
    session: AsyncSession = Depends(get_session),
) -> List[DeliveryScheduleRead]:
    """All stored schedules (restaurants without one use the default)."""
    try:
        schedules = await ScheduleStore(session).list_schedules()
    except InvalidScheduleConfig as e:
        raise _invalid(e)
    return [DeliveryScheduleRead.from_config(s) for s in schedules]


@router.get(
    "/restaurants/{restaurant_id}/delivery-schedule",
    response_model=DeliveryScheduleRead,
)
async def get_delivery_schedule(
    restaurant_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> DeliveryScheduleRead:
    """Stored schedule for a restaurant, or the default rules if none is saved."""
    await _require_restaurant(session, restaurant_id)
    try:
        schedule = await ScheduleStore(session).get_schedule(restaurant_id)
    except InvalidScheduleConfig as e:
        raise _invalid(e)

    if schedule is None:
        return DeliveryScheduleRead.from_config(default_schedule(restaurant_id), is_default=True)
    return DeliveryScheduleRead.from_config(schedule)


@router.put(
    "/restaurants/{restaurant_id}/delivery-schedule",
    response_model=DeliveryScheduleRead,
)
async def save_delivery_schedule(
    restaurant_id: UUID,
    data: DeliveryScheduleWrite,
    session: AsyncSession = Depends(get_session),
) -> DeliveryScheduleRead:
    """Replace a restaurant's schedule as a whole."""
    await _require_restaurant(session, restaurant_id)
    try:
        schedule = data.to_config(restaurant_id)
    except InvalidScheduleConfig as e:
        raise _invalid(e)

    await ScheduleStore(session).put_schedule(schedule)
    await session.commit()

    return DeliveryScheduleRead.from_config(schedule)


@router.get(
    "/restaurants/{restaurant_id}/delivery-dates",
    response_model=EligibleDatesResponse,
)
async def get_delivery_dates(
    restaurant_id: UUID,
    reference_date: Optional[date] = None,
    today: date = Depends(get_today),
    session: AsyncSession = Depends(get_session),
) -> EligibleDatesResponse:
    """
    Dates the restaurant may currently choose for delivery.

    An empty list means no delivery is possible right now; it is not an error.
    """
    await _require_restaurant(session, restaurant_id)
    reference = reference_date or today
    try:
        schedule = await ScheduleStore(session).get_effective_schedule(restaurant_id)
    except InvalidScheduleConfig as e:
        raise _invalid(e)

    dates = compute_eligible_dates(schedule, reference)
    return EligibleDatesResponse(
        restaurant_id=restaurant_id,
        reference_date=reference,
        dates=dates,
        available=bool(dates),
        earliest=dates[0] if dates else None,
    )


@router.post(
    "/delivery-schedules/apply-template",
    response_model=ApplyTemplateResponse,
)
async def apply_schedule_template(
    data: ApplyTemplateRequest,
    session: AsyncSession = Depends(get_session),
) -> ApplyTemplateResponse:
    """
    Copy one restaurant's schedule onto others.

    Without target_restaurant_ids every active restaurant is targeted. Each
    target succeeds or fails on its own; the response lists both.
    """
    await _require_restaurant(session, data.source_restaurant_id)
    store = ScheduleStore(session)
    try:
        source = await store.get_schedule(data.source_restaurant_id)
    except InvalidScheduleConfig as e:
        raise _invalid(e)
    if source is None:
        source = default_schedule(data.source_restaurant_id)

    applicator = ScheduleTemplateApplicator(store)
    if data.target_restaurant_ids is None:
        result = await applicator.apply_to_all(source, RestaurantDirectory(session))
    else:
        result = await applicator.apply(source, data.target_restaurant_ids)
    await session.commit()

    return ApplyTemplateResponse(
        source_restaurant_id=data.source_restaurant_id,
        succeeded=result.succeeded,
        failed=result.failed,
        skipped=result.skipped,
        all_succeeded=result.all_succeeded,
    )
