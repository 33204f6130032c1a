"""
Saved property service: a user's bookmarks.
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.models.property import Property
from marketplace.models.saved_property import SavedProperty
from marketplace.models.user import User
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.saved_property import SavedPropertyRepository
from marketplace.utils.exceptions import (
    DuplicateResourceError,
    PropertyNotFoundError,
    NotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class SavedPropertyService:
    """Bookmarking listings for the current user."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.saved_repo = SavedPropertyRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def save_property(self, property_id: uuid.UUID, current_user: User) -> SavedProperty:
        """
        Bookmark a listing.

        Raises:
            PropertyNotFoundError: If the listing does not exist
            DuplicateResourceError: If the user already saved it
        """
        if not await self.property_repo.exists(property_id):
            raise PropertyNotFoundError(str(property_id))

        if await self.saved_repo.get_for_user(current_user.id, property_id):
            raise DuplicateResourceError("Saved property", str(property_id))

        saved = await self.saved_repo.create({"user_id": current_user.id, "property_id": property_id})
        logger.info(f"User {current_user.id} saved property {property_id}")
        return saved

    async def unsave_property(self, property_id: uuid.UUID, current_user: User) -> None:
        removed = await self.saved_repo.delete_for_user(current_user.id, property_id)
        if not removed:
            raise NotFoundError("Saved property", str(property_id))
        logger.info(f"User {current_user.id} removed saved property {property_id}")

    async def list_saved(self, current_user: User) -> List[Tuple[SavedProperty, Property]]:
        return await self.saved_repo.list_for_user(current_user.id)

    async def is_saved(self, property_id: uuid.UUID, current_user: User) -> bool:
        return await self.saved_repo.get_for_user(current_user.id, property_id) is not None
