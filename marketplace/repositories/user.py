"""
User repository for marketplace accounts.
Provides sign-up, credential checks and the admin user listing queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
from marketplace.repositories.base import BaseRepository
from marketplace.models.user import User
from marketplace.models.property import Property
from marketplace.models.saved_property import SavedProperty
from marketplace.database import utcnow
from marketplace.utils.auth import hash_password
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for marketplace users."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, full_name
                      Optional: phone

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        user_data = dict(user_data)
        email = User.validate_email_format(user_data["email"])

        existing_user = await self.get_by_email(email)
        if existing_user:
            raise ValueError(f"User with email {email} already exists")

        password = user_data.pop("password")
        create_data = {
            **user_data,
            "email": email,
            "hashed_password": hash_password(password),
            "is_active": user_data.get("is_active", True),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(User).where(User.email == normalized_email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.is_active:
            logger.debug(f"Authentication failed: user {email} is inactive")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return await self.update(user.id, {"last_sign_in_at": utcnow()})

    async def search_with_listing_counts(
        self,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Tuple[User, int]], int]:
        """
        List users newest first with the number of properties each one listed.

        Args:
            search: Case-insensitive match against email, name or phone
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of ((user, listed_properties) rows, total matching users)
        """
        try:
            listing_counts = (
                select(Property.user_id, func.count(Property.id).label("listed"))
                .group_by(Property.user_id)
                .subquery()
            )

            conditions = []
            if search and search.strip():
                pattern = f"%{search.strip().lower()}%"
                conditions.append(or_(
                    func.lower(User.email).like(pattern),
                    func.lower(User.full_name).like(pattern),
                    func.lower(func.coalesce(User.phone, "")).like(pattern),
                ))

            query = (
                select(User, func.coalesce(listing_counts.c.listed, 0))
                .outerjoin(listing_counts, listing_counts.c.user_id == User.id)
                .where(*conditions)
                .order_by(User.created_at.desc())
                .offset(skip)
            )
            if limit is not None:
                query = query.limit(limit)

            count_query = select(func.count(User.id)).where(*conditions)

            rows = (await self.db.execute(query)).all()
            total = (await self.db.execute(count_query)).scalar() or 0
            return [(user, int(listed)) for user, listed in rows], total
        except Exception as e:
            logger.error(f"Failed to list users: {e}")
            raise

    async def delete_with_saved_properties(self, user_id: uuid.UUID) -> bool:
        """
        Delete a user and their bookmarks in one transaction.
        The user's listings are kept.

        Returns:
            True if the user existed and was deleted
        """
        try:
            await self.db.execute(delete(SavedProperty).where(SavedProperty.user_id == user_id))
            result = await self.db.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                await self.db.rollback()
                return False
            await self.db.commit()
            logger.info(f"Deleted user {user_id} and their saved properties")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise

    async def count_created_since(self, since: datetime) -> int:
        try:
            result = await self.db.execute(select(func.count(User.id)).where(User.created_at >= since))
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count recent users: {e}")
            raise
