"""Shared FastAPI dependencies (clock and email dispatch), overridable in tests."""
from __future__ import annotations

from datetime import date

from beverage_portal.services.order_notifications import EmailDispatcher


def get_today() -> date:
    """Reference date for delivery windows; the only place the clock is read."""
    return date.today()


def get_email_dispatcher() -> EmailDispatcher:
    return EmailDispatcher()
