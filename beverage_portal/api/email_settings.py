from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.database import get_session
from beverage_portal.schemas.email_settings import EmailSettingsRead, EmailSettingsUpdate
from beverage_portal.services.email_settings_service import EmailSettingsService

router = APIRouter(prefix="/api/v1/email-settings", tags=["email-settings"])


@router.get("", response_model=EmailSettingsRead)
async def get_email_settings(
    session: AsyncSession = Depends(get_session),
) -> EmailSettingsRead:
    """Recipients that order notifications go to."""
    return await EmailSettingsService(session).get_recipients()


@router.put("", response_model=EmailSettingsRead)
async def save_email_settings(
    data: EmailSettingsUpdate,
    session: AsyncSession = Depends(get_session),
) -> EmailSettingsRead:
    """Replace the notification recipients."""
    saved = await EmailSettingsService(session).save(data)
    await session.commit()
    return saved
