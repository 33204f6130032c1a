"""
Property model for sale and rental listings.
Handles listing data, contact details, moderation flags and image references.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, JSON, Uuid, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from decimal import Decimal
import enum
import re
import uuid
from typing import List, Optional


MOBILE_NUMBER_PATTERN = re.compile(r"^\d{10}$")


class PropertyType(str, enum.Enum):
    """Listing type enumeration."""
    SALE = "sale"
    RENT = "rent"


class Property(Base):
    """
    Property listing owned by a marketplace user.

    `user_id` is a soft reference: there is no foreign key constraint, so a
    listing outlives its owner and admin queries LEFT JOIN the users table.
    """

    __tablename__ = "properties"

    # Fields only an admin may change
    ADMIN_ONLY_FIELDS = frozenset({"verification_status", "views_count"})

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Detailed property description"
    )

    address: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Street address shown on the listing"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True,
        comment="Asking price or monthly rent in INR"
    )

    type: Mapped[PropertyType] = mapped_column(
        SQLEnum(
            PropertyType,
            name="property_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        index=True,
        comment="sale or rent"
    )

    beds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Number of bedrooms")
    baths: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Number of bathrooms")
    sqft: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Area in square feet")

    image_url: Mapped[Optional[str]] = mapped_column(
        String(1000),
        nullable=True,
        comment="Public URL of the primary image"
    )

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Public URLs of all listing images"
    )

    mobile_number: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        comment="Contact number, exactly 10 digits"
    )

    verification_status: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Set by admins once a listing has been checked"
    )

    views_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of detail page views"
    )

    latitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=8),
        nullable=True,
        comment="Property latitude coordinate"
    )

    longitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=11, scale=8),
        nullable=True,
        comment="Property longitude coordinate"
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
        comment="ID of the user who listed the property"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    def validate_price(self) -> None:
        if self.price is None or self.price <= 0:
            raise ValueError("Price must be greater than 0")

        if self.price > Decimal("999999999999.99"):
            raise ValueError("Property price exceeds maximum allowed value")

    def validate_rooms(self) -> None:
        """
        Validate optional bed, bath and area counts.

        Raises:
            ValueError: If a count is present but not positive
        """
        for field, label in (("beds", "beds"), ("baths", "baths"), ("sqft", "square footage")):
            value = getattr(self, field)
            if value is not None and value <= 0:
                raise ValueError(f"Number of {label} must be greater than 0")

    def validate_mobile_number(self) -> None:
        if self.mobile_number and not MOBILE_NUMBER_PATTERN.match(self.mobile_number):
            raise ValueError("Mobile number must be 10 digits")

    def validate_coordinates(self) -> None:
        """
        Validate latitude and longitude coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if self.latitude is not None:
            if not (-90 <= self.latitude <= 90):
                raise ValueError("Latitude must be between -90 and 90 degrees")

        if self.longitude is not None:
            if not (-180 <= self.longitude <= 180):
                raise ValueError("Longitude must be between -180 and 180 degrees")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        if not self.title or not self.title.strip():
            raise ValueError("Title is required")
        if not self.address or not self.address.strip():
            raise ValueError("Address is required")
        self.validate_price()
        self.validate_rooms()
        self.validate_mobile_number()
        self.validate_coordinates()

    def to_dict(self) -> dict:
        """
        Convert property to a plain dictionary.
        This is the shape the in-memory filters work on.
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "address": self.address,
            "price": float(self.price),
            "type": self.type.value,
            "beds": self.beds,
            "baths": self.baths,
            "sqft": self.sqft,
            "image_url": self.image_url,
            "images": list(self.images or []),
            "mobile_number": self.mobile_number,
            "verification_status": self.verification_status,
            "views_count": self.views_count,
            "latitude": float(self.latitude) if self.latitude is not None else None,
            "longitude": float(self.longitude) if self.longitude is not None else None,
            "user_id": str(self.user_id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# Browse listings newest first, optionally narrowed by type
type_created_index = Index(
    "idx_properties_type_created",
    Property.type,
    Property.created_at.desc()
)

owner_created_index = Index(
    "idx_properties_owner_created",
    Property.user_id,
    Property.created_at.desc()
)
