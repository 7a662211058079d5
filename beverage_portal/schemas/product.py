from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    """Base schema for a catalog product."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    price_per_stack: Decimal = Field(..., ge=0)
    items_per_stack: int = Field(default=1, ge=1)
    unit: str = Field(default="stack", max_length=20)
    sort_order: int = 0


class ProductCreate(ProductBase):
    """Schema for creating a product."""

    is_active: bool = True


class ProductUpdate(BaseModel):
    """Schema for updating a product."""

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price_per_stack: Optional[Decimal] = Field(None, ge=0)
    items_per_stack: Optional[int] = Field(None, ge=1)
    unit: Optional[str] = Field(None, max_length=20)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class ProductRead(ProductBase):
    """Schema for reading a product."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
