"""
Profile Schemas for API Validation
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ProfileCreate(BaseModel):
    """Schema for registering the caller's profile."""

    display_name: Optional[str] = Field(None, max_length=255)

    @field_validator("display_name")
    @classmethod
    def clean_display_name(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)


class ProfileUpdate(ProfileCreate):
    """Schema for updating a profile. All fields optional."""


class ProfileResponse(BaseModel):
    """Schema for profile response."""

    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
