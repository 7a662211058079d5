from __future__ import annotations

import calendar
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.api.dependencies import get_today
from beverage_portal.database import get_session
from beverage_portal.schemas.report import ReportSummary
from beverage_portal.services.report_service import ReportService

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def get_report_summary(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    restaurant_id: Optional[UUID] = None,
    today: date = Depends(get_today),
    session: AsyncSession = Depends(get_session),
) -> ReportSummary:
    """
    Order totals by product and by restaurant for a delivery date range.

    Defaults to the current calendar month.
    """
    if date_from is None:
        date_from = today.replace(day=1)
    if date_to is None:
        last_day = calendar.monthrange(today.year, today.month)[1]
        date_to = today.replace(day=last_day)
    if date_from > date_to:
        raise HTTPException(status_code=422, detail="date_from must not be after date_to")

    service = ReportService(session)
    return await service.summary(date_from, date_to, restaurant_id)
