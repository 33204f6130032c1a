"""
Admin model for the moderation dashboard.
Admins are a separate identity table, not a role flag on users.
"""

from sqlalchemy import String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from marketplace.utils.auth import hash_password, verify_password
from datetime import datetime
import enum
from typing import Optional


class AdminStatus(str, enum.Enum):
    """Admin account status. Only active admins may run privileged operations."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Admin(Base):
    """Administrator account with its own salted password hash."""

    __tablename__ = "admins"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Admin email address - unique among admins"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Admin display name"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    status: Mapped[AdminStatus] = mapped_column(
        SQLEnum(
            AdminStatus,
            name="admin_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=AdminStatus.ACTIVE,
        index=True,
        comment="active or inactive"
    )

    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Timestamp of the last successful credential check"
    )

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email}, status={self.status})>"

    @property
    def is_active(self) -> bool:
        return self.status == AdminStatus.ACTIVE

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def set_password(self, password: str) -> None:
        self.password_hash = hash_password(password)

    def to_public_dict(self) -> dict:
        """The fields an admin session exposes: id, email and name."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
        }
