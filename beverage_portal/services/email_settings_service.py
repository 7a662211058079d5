"""Notification recipients: stored admin settings with config fallback."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.config import Settings, get_settings
from beverage_portal.models.email_settings import EmailSettings
from beverage_portal.schemas.email_settings import EmailSettingsRead, EmailSettingsUpdate

logger = logging.getLogger(__name__)


class EmailSettingsService:
    """Service for reading and saving order notification recipients."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    async def get_recipients(self) -> EmailSettingsRead:
        """Saved recipients, or the configured defaults when nothing is saved."""
        row = await self._get_row()
        if row is None:
            return EmailSettingsRead(
                primary_recipients=self.settings.order_primary_recipients_list,
                cc_recipients=self.settings.order_cc_recipients_list,
                supplier_recipient=self.settings.supplier_recipient or None,
                is_default=True,
            )
        return EmailSettingsRead(
            primary_recipients=list(row.primary_recipients or []),
            cc_recipients=list(row.cc_recipients or []),
            supplier_recipient=row.supplier_recipient,
            updated_by=row.updated_by,
            updated_at=row.updated_at,
        )

    async def save(self, data: EmailSettingsUpdate) -> EmailSettingsRead:
        row = await self._get_row()
        if row is None:
            row = EmailSettings()
            self.session.add(row)

        row.primary_recipients = data.primary_recipients
        row.cc_recipients = data.cc_recipients
        row.supplier_recipient = data.supplier_recipient
        row.updated_by = data.updated_by
        row.updated_at = datetime.utcnow()
        await self.session.flush()

        logger.info(
            "Email recipients updated by %s (%d primary, %d cc)",
            data.updated_by,
            len(data.primary_recipients),
            len(data.cc_recipients),
        )
        return await self.get_recipients()

    async def _get_row(self) -> Optional[EmailSettings]:
        result = await self.session.execute(
            select(EmailSettings).order_by(EmailSettings.updated_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()
