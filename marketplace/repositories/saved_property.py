"""
Saved property repository for user bookmarks and the admin bookmark overview.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from marketplace.repositories.base import BaseRepository
from marketplace.models.saved_property import SavedProperty
from marketplace.models.property import Property
from marketplace.models.user import User
from typing import Optional, List, Tuple, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class SavedPropertyRepository(BaseRepository[SavedProperty]):
    """Repository for saved-property bookmarks."""

    def __init__(self, db: AsyncSession):
        super().__init__(SavedProperty, db)

    async def get_for_user(self, user_id: uuid.UUID, property_id: uuid.UUID) -> Optional[SavedProperty]:
        try:
            result = await self.db.execute(
                select(SavedProperty).where(
                    SavedProperty.user_id == user_id,
                    SavedProperty.property_id == property_id,
                )
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to look up saved property {property_id} for user {user_id}: {e}")
            raise

    async def delete_for_user(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(SavedProperty).where(
                    SavedProperty.user_id == user_id,
                    SavedProperty.property_id == property_id,
                )
            )
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove saved property {property_id} for user {user_id}: {e}")
            raise

    async def list_for_user(self, user_id: uuid.UUID) -> List[Tuple[SavedProperty, Property]]:
        """
        A user's bookmarks joined with their properties, newest bookmark first.
        Bookmarks whose property was deleted are left out.
        """
        try:
            result = await self.db.execute(
                select(SavedProperty, Property)
                .join(Property, Property.id == SavedProperty.property_id)
                .where(SavedProperty.user_id == user_id)
                .order_by(SavedProperty.created_at.desc())
            )
            return [(row[0], row[1]) for row in result.all()]
        except Exception as e:
            logger.error(f"Failed to list saved properties for user {user_id}: {e}")
            raise

    async def list_all_enriched(self) -> List[Tuple[Any, ...]]:
        """
        Every bookmark with property and user details, newest first.

        Returns rows of (saved, title, price, type, user_email, user_name);
        property and user columns are None when the row they point at is gone.
        """
        try:
            result = await self.db.execute(
                select(
                    SavedProperty,
                    Property.title,
                    Property.price,
                    Property.type,
                    User.email,
                    User.full_name,
                )
                .outerjoin(Property, Property.id == SavedProperty.property_id)
                .outerjoin(User, User.id == SavedProperty.user_id)
                .order_by(SavedProperty.created_at.desc())
            )
            return [tuple(row) for row in result.all()]
        except Exception as e:
            logger.error(f"Failed to list saved properties: {e}")
            raise
