"""
Pydantic schemas for admin management and the dashboard.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from marketplace.models.admin import AdminStatus
import uuid


class AdminCreate(BaseModel):
    """Payload for creating an admin from the dashboard."""

    email: EmailStr = Field(..., description="New admin's email address", examples=["moderator@example.com"])
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    password: str = Field(..., min_length=8, max_length=72, description="Initial password")
    status: AdminStatus = Field(AdminStatus.ACTIVE, description="active or inactive")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class AdminUpdate(BaseModel):
    """
    Admin edit form. When a password is present it is re-hashed,
    otherwise only the name and status change.
    """

    name: str = Field(..., min_length=1, max_length=255)
    password: Optional[str] = Field(None, max_length=72, description="New password, leave empty to keep")
    status: Optional[AdminStatus] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if v is None or v == "":
            return None
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: EmailStr
    name: str
    status: AdminStatus
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SavedPropertyAdminItem(BaseModel):
    """A bookmark in the admin overview, with property and user details."""

    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    created_at: datetime
    property_title: str
    property_price: Optional[Decimal] = None
    property_type: Optional[str] = None
    user_email: str
    user_name: Optional[str] = None


class SavedPropertyAdminListResponse(BaseModel):
    saved_properties: List[SavedPropertyAdminItem]
    total: int


class DashboardStats(BaseModel):
    total_users: int
    total_properties: int
    total_saved_properties: int
    recent_users: int = Field(..., description="Users created in the last 30 days")
    recent_properties: int = Field(..., description="Properties created in the last 30 days")
