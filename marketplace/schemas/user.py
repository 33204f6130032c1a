"""
Pydantic schemas for marketplace users.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime
import re
import uuid

PHONE_PATTERN = re.compile(r"^\d{10}$")


def clean_phone(value: Optional[str]) -> Optional[str]:
    """Blank phone numbers become None; anything else must be 10 digits."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("Mobile number must be 10 digits")
    return value


class UserCreate(BaseModel):
    """Sign-up payload."""

    email: EmailStr = Field(..., description="User's email address", examples=["buyer@example.com"])
    password: str = Field(..., min_length=8, max_length=72, description="Password (minimum 8 characters)")
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name", examples=["Priya Sharma"])
    phone: Optional[str] = Field(None, description="10 digit mobile number", examples=["9876543210"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return clean_phone(v)


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: EmailStr
    full_name: str
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AdminUserListItem(UserResponse):
    """User row in the admin user list."""

    listed_properties: int = Field(0, description="Number of properties the user has listed")


class UserListResponse(BaseModel):
    users: List[AdminUserListItem]
    total: int
    skip: int
    limit: Optional[int]
