"""
Pydantic schemas for property requests and responses.
Handles listing CRUD, the admin update allow-list and browse filters.
"""

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from typing import ClassVar, Optional, List, Tuple
from datetime import datetime
from decimal import Decimal
from marketplace.models.property import PropertyType
from marketplace.schemas.user import clean_phone
from marketplace.utils.filters import PRICE_RANGES
import uuid


class PropertyBase(BaseModel):
    """Base property schema with the fields an owner fills in."""

    title: str = Field(..., min_length=1, max_length=255, description="Listing title",
                       examples=["2BHK apartment near Powai lake"])
    description: Optional[str] = Field(None, max_length=5000, description="Detailed property description")
    address: str = Field(..., min_length=1, max_length=500, description="Property address",
                         examples=["Hiranandani Gardens, Powai, Mumbai"])
    price: Decimal = Field(..., gt=0, description="Sale price or monthly rent in INR", examples=[25000])
    type: PropertyType = Field(..., description="sale or rent", examples=["rent"])
    beds: Optional[int] = Field(None, gt=0, le=50, description="Number of bedrooms")
    baths: Optional[int] = Field(None, gt=0, le=50, description="Number of bathrooms")
    sqft: Optional[int] = Field(None, gt=0, le=1000000, description="Area in square feet")
    mobile_number: Optional[str] = Field(None, description="Contact number, 10 digits", examples=["9876543210"])
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    @field_validator("title", "address")
    @classmethod
    def strip_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("mobile_number")
    @classmethod
    def validate_mobile_number(cls, v):
        return clean_phone(v)

    @model_validator(mode="after")
    def validate_coordinates(self):
        """Validate that both coordinates are provided together or both are None."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class PropertyCreate(PropertyBase):
    """Schema for creating a new listing."""

    image_url: Optional[str] = Field(None, max_length=1000)
    images: List[str] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    """
    Owner update. Only fields present in the request are changed.
    verification_status and views_count are not part of this schema.
    """

    model_config = ConfigDict(extra="forbid")

    non_nullable_fields: ClassVar[Tuple[str, ...]] = ("title", "address", "price", "type", "images")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    price: Optional[Decimal] = Field(None, gt=0)
    type: Optional[PropertyType] = None
    beds: Optional[int] = Field(None, gt=0, le=50)
    baths: Optional[int] = Field(None, gt=0, le=50)
    sqft: Optional[int] = Field(None, gt=0, le=1000000)
    image_url: Optional[str] = Field(None, max_length=1000)
    images: Optional[List[str]] = None
    mobile_number: Optional[str] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    @field_validator("mobile_number")
    @classmethod
    def validate_mobile_number(cls, v):
        return clean_phone(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in self.non_nullable_fields:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    @model_validator(mode="after")
    def validate_coordinate_pair(self):
        """Coordinates change together: both set, or both cleared."""
        sent = {"latitude", "longitude"} & self.model_fields_set
        if not sent:
            return self
        if len(sent) == 1:
            raise ValueError("latitude and longitude must be updated together")
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class AdminPropertyUpdate(PropertyUpdate):
    """
    Columns an admin may change. Any key outside this schema is rejected
    before an UPDATE is built.
    """

    non_nullable_fields: ClassVar[Tuple[str, ...]] = PropertyUpdate.non_nullable_fields + (
        "verification_status",
        "views_count",
    )

    price: Optional[Decimal] = Field(None, ge=0)
    verification_status: Optional[bool] = None
    views_count: Optional[int] = Field(None, ge=0)


class VerificationUpdate(BaseModel):
    verification_status: bool


class PropertyResponse(BaseModel):
    """Property response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    address: str
    price: Decimal
    type: PropertyType
    beds: Optional[int] = None
    baths: Optional[int] = None
    sqft: Optional[int] = None
    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    mobile_number: Optional[str] = None
    verification_status: bool
    views_count: int
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class PropertyWithOwnerResponse(PropertyResponse):
    """Property with the owning user's name and email, None once the owner is gone."""

    owner_name: Optional[str] = None
    owner_email: Optional[str] = None


class PropertyBrowseItem(BaseModel):
    """A listing in browse results, with its display price."""

    id: uuid.UUID
    title: str
    address: Optional[str] = None
    price: float
    price_display: str
    type: PropertyType
    beds: Optional[int] = None
    baths: Optional[int] = None
    sqft: Optional[int] = None
    image_url: str = ""
    images: List[str] = Field(default_factory=list)
    verification_status: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None


class PropertyBrowseResponse(BaseModel):
    properties: List[PropertyBrowseItem]
    total: int


class PropertyBrowseFilters(BaseModel):
    """Browse query parameters."""

    type: str = Field("all", description="all, sale or rent")
    price_range: Optional[str] = Field(None, description="Price range identifier such as 500000-2000000")
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    radius_km: Optional[float] = Field(None, gt=0, le=500)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v not in ("all", "sale", "rent"):
            raise ValueError("type must be one of: all, sale, rent")
        return v

    @field_validator("price_range")
    @classmethod
    def validate_price_range(cls, v):
        if v is not None and v not in PRICE_RANGES:
            raise ValueError(f"price_range must be one of: {', '.join(PRICE_RANGES)}")
        return v

    @model_validator(mode="after")
    def validate_location(self):
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be provided together")
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price cannot be greater than max_price")
        return self
