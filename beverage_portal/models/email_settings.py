from __future__ import annotations

from datetime import datetime
from typing import List, Optional
import uuid

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from beverage_portal.database import Base


class EmailSettings(Base):
    """Recipients for order notifications (single row, edited by the admin)."""

    __tablename__ = "email_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    primary_recipients: Mapped[List[str]] = mapped_column(JSON, default=lambda: [])
    cc_recipients: Mapped[List[str]] = mapped_column(JSON, default=lambda: [])
    supplier_recipient: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<EmailSettings(primary={self.primary_recipients}, cc={self.cc_recipients})>"
