from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List
import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, JSON, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from beverage_portal.database import Base

if TYPE_CHECKING:
    from beverage_portal.models.restaurant import Restaurant


class DeliverySchedule(Base):
    """
    Stored delivery rules for one restaurant.

    Weekday codes run 0=Sunday .. 6=Saturday. Blocked dates are kept as
    ISO strings; rows are parsed into DeliveryScheduleConfig before use.
    """

    __tablename__ = "delivery_schedules"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    restaurant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False, unique=True
    )

    allowed_weekdays: Mapped[List[int]] = mapped_column(JSON, default=lambda: [1, 2, 3, 4, 5])
    min_lead_days: Mapped[int] = mapped_column(Integer, default=1)
    max_lead_days: Mapped[int] = mapped_column(Integer, default=14)
    blocked_dates: Mapped[List[str]] = mapped_column(JSON, default=lambda: [])
    notes: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(
        "Restaurant", back_populates="delivery_schedule"
    )

    def __repr__(self) -> str:
        return (
            f"<DeliverySchedule(restaurant_id={self.restaurant_id}, "
            f"days={self.allowed_weekdays}, lead={self.min_lead_days}-{self.max_lead_days})>"
        )
