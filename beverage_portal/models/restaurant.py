from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
import uuid

from sqlalchemy import Boolean, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from beverage_portal.database import Base

if TYPE_CHECKING:
    from beverage_portal.models.delivery_schedule import DeliverySchedule
    from beverage_portal.models.order import Order


class Restaurant(Base):
    """A restaurant location that places beverage orders."""

    __tablename__ = "restaurants"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    address: Mapped[str] = mapped_column(String(500), default="")
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    delivery_schedule: Mapped[Optional["DeliverySchedule"]] = relationship(
        "DeliverySchedule",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        uselist=False,
    )
    orders: Mapped[List["Order"]] = relationship(
        "Order", back_populates="restaurant", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, code={self.code}, name={self.name})>"
