from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class EmailSettingsUpdate(BaseModel):
    """Schema for saving notification recipients."""

    primary_recipients: List[EmailStr] = Field(..., min_length=1)
    cc_recipients: List[EmailStr] = Field(default_factory=list)
    supplier_recipient: Optional[EmailStr] = None
    updated_by: Optional[str] = Field(None, max_length=255)

    @field_validator("supplier_recipient", mode="before")
    @classmethod
    def blank_supplier_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class EmailSettingsRead(BaseModel):
    """Notification recipients currently in effect."""

    primary_recipients: List[str]
    cc_recipients: List[str]
    supplier_recipient: Optional[str]
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    is_default: bool = False
