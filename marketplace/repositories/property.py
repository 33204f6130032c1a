"""
Property repository for listings.
Provides owner lookups, the owner-joined admin listing and the view counter.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from marketplace.repositories.base import BaseRepository
from marketplace.models.property import Property
from marketplace.models.user import User
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)

# (property, owner_name, owner_email); owner fields are None once the owner is gone
PropertyWithOwner = Tuple[Property, Optional[str], Optional[str]]


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property with validation.

        Args:
            property_data: Dictionary containing property information,
                including the owning user_id

        Returns:
            Created property instance

        Raises:
            ValueError: If property validation fails
        """
        property_obj = Property(**property_data)
        if property_obj.images is None:
            property_obj.images = []
        property_obj.validate_all()

        try:
            self.db.add(property_obj)
            await self.db.commit()
            await self.db.refresh(property_obj)
            logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
            return property_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

    def _with_owner_query(self):
        return (
            select(Property, User.full_name, User.email)
            .outerjoin(User, User.id == Property.user_id)
        )

    async def get_with_owner(self, property_id: uuid.UUID) -> Optional[PropertyWithOwner]:
        """Get a property together with its owner's name and email."""
        try:
            result = await self.db.execute(
                self._with_owner_query()
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            row = result.first()
            return (row[0], row[1], row[2]) if row else None
        except Exception as e:
            logger.error(f"Failed to get property {property_id} with owner: {e}")
            raise

    async def list_with_owners(self) -> List[PropertyWithOwner]:
        """Every property LEFT JOIN its owner, newest first."""
        try:
            result = await self.db.execute(
                self._with_owner_query()
                .order_by(Property.created_at.desc())
                .execution_options(populate_existing=True)
            )
            return [(row[0], row[1], row[2]) for row in result.all()]
        except Exception as e:
            logger.error(f"Failed to list properties with owners: {e}")
            raise

    async def list_newest(self) -> List[Property]:
        """All listings newest first, the input of the in-memory browse filters."""
        return await self.get_multi(limit=None, order_by="-created_at")

    async def get_by_owner(self, user_id: uuid.UUID) -> List[Property]:
        return await self.get_multi(limit=None, filters={"user_id": user_id}, order_by="-created_at")

    async def record_view(self, property_id: uuid.UUID) -> bool:
        """
        Increment the view counter in the database.
        Does not touch updated_at, a view is not an edit.
        """
        try:
            stmt = (
                update(Property)
                .where(Property.id == property_id)
                .values(views_count=Property.views_count + 1, updated_at=Property.updated_at)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to record view for property {property_id}: {e}")
            raise

    async def count_created_since(self, since: datetime) -> int:
        try:
            result = await self.db.execute(
                select(func.count(Property.id)).where(Property.created_at >= since)
            )
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count recent properties: {e}")
            raise
