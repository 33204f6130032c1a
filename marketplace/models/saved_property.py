"""
SavedProperty model for user bookmarks.
"""

from sqlalchemy import ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from marketplace.database import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marketplace.models.user import User


class SavedProperty(Base):
    """
    Join row linking a user to a property they bookmarked.

    Removing the user removes the bookmark. Removing the property does not,
    so aggregate listings must tolerate a missing property.
    """

    __tablename__ = "saved_properties"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_saved_properties_user_property"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who saved the property"
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
        comment="Bookmarked property"
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="saved_properties",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<SavedProperty(user_id={self.user_id}, property_id={self.property_id})>"
