from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    """Order lifecycle status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderLineCreate(BaseModel):
    """A product and quantity in a new order."""

    product_id: UUID
    quantity: int = Field(..., gt=0)


class OrderCreate(BaseModel):
    """Schema for submitting an order."""

    restaurant_id: UUID
    delivery_date: date
    items: List[OrderLineCreate] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=2000)
    created_by: str = Field(..., min_length=1, max_length=255)


class OrderStatusUpdate(BaseModel):
    """Schema for moving an order to another status."""

    status: OrderStatus
    actor: str = Field(..., min_length=1, max_length=255)


class OrderItemRead(BaseModel):
    """Schema for reading an order line."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    product_code: str
    product_name: str
    quantity: int
    price_per_stack: Decimal
    total_price: Decimal


class OrderRead(BaseModel):
    """Schema for reading an order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    restaurant_id: UUID
    delivery_date: date
    status: OrderStatus
    total_amount: Decimal
    notes: Optional[str]
    created_by: str
    confirmed_by: Optional[str]
    confirmed_at: Optional[datetime]
    email_sent: bool
    email_sent_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemRead] = Field(default_factory=list)


class OrderSummary(BaseModel):
    """Order row for lists and the dashboard (no lines)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    restaurant_id: UUID
    restaurant_name: Optional[str] = None
    delivery_date: date
    status: OrderStatus
    total_amount: Decimal
    created_by: str
    created_at: datetime


class OrderFilters(BaseModel):
    """Filters for listing orders."""

    status: Optional[OrderStatus] = None
    restaurant_id: Optional[UUID] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    search: Optional[str] = None


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard."""

    total_orders: int
    pending_orders: int
    today_orders: int
    total_amount: Decimal
    recent_orders: List[OrderSummary] = Field(default_factory=list)
