from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProductStats(BaseModel):
    """Ordered quantity and value for one product code."""

    code: str
    name: str
    total_quantity: int
    total_amount: Decimal


class RestaurantStats(BaseModel):
    """Order count and value for one restaurant."""

    restaurant_id: UUID
    name: str
    order_count: int
    total_amount: Decimal


class ReportSummary(BaseModel):
    """Activity over a delivery date range, cancelled orders excluded."""

    date_from: date
    date_to: date
    restaurant_id: Optional[UUID] = None
    total_orders: int
    total_amount: Decimal
    avg_order_value: Decimal
    unique_restaurants: int
    products: List[ProductStats] = Field(default_factory=list)
    restaurants: List[RestaurantStats] = Field(default_factory=list)
