"""
Admin dashboard service: managing admins, users, bookmarks and the dashboard counters.
Every method takes the requesting admin's id and checks it is still an active admin.
"""

from datetime import timedelta
from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.database import utcnow
from marketplace.repositories.admin import AdminRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.saved_property import SavedPropertyRepository
from marketplace.models.admin import Admin, AdminStatus
from marketplace.models.user import User
from marketplace.services.admin_auth import AdminAuthService
from marketplace.utils.exceptions import (
    AdminNotFoundError,
    BusinessRuleViolationError,
    DuplicateResourceError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_DAYS = 30


class AdminService:
    """Privileged operations behind the admin dashboard."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_auth = AdminAuthService(db_session)
        self.admin_repo = AdminRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.saved_repo = SavedPropertyRepository(db_session)

    # Admin accounts

    async def create_admin(
        self,
        requester_id: uuid.UUID,
        email: str,
        name: str,
        password: str,
        status: AdminStatus = AdminStatus.ACTIVE
    ) -> uuid.UUID:
        """
        Create an admin account.

        Nothing is inserted unless the requester is an active admin.

        Returns:
            The new admin's id

        Raises:
            NotActiveAdminError: If the requester is not an active admin
            DuplicateResourceError: If the email already belongs to an admin
            ValidationError: If the password is too short
        """
        await self.admin_auth.require_active_admin(requester_id)

        if await self.admin_repo.get_by_email(email):
            raise DuplicateResourceError("Admin", email.lower().strip())

        try:
            admin = await self.admin_repo.create_admin(email, name, password, AdminStatus(status))
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Admin {requester_id} created admin {admin.email}")
        return admin.id

    async def update_admin_with_password(
        self,
        requester_id: uuid.UUID,
        admin_id: uuid.UUID,
        name: str,
        password: str,
        status: Optional[AdminStatus] = None
    ) -> bool:
        """
        Change an admin's name and password, re-hashing the password.

        Returns:
            False if the target admin does not exist
        """
        await self.admin_auth.require_active_admin(requester_id)

        try:
            password_hash = self.admin_auth.hash_password(password)
        except ValueError as e:
            raise ValidationError(str(e))

        values: Dict[str, Any] = {"name": name.strip(), "password_hash": password_hash}
        if status is not None:
            values["status"] = AdminStatus(status)
            self._check_not_self_deactivation(requester_id, admin_id, values["status"])

        updated = await self.admin_repo.update(admin_id, values)
        if updated is None:
            return False

        logger.info(f"Admin {requester_id} updated admin {admin_id} including password")
        return True

    async def update_admin(
        self,
        requester_id: uuid.UUID,
        admin_id: uuid.UUID,
        name: Optional[str] = None,
        status: Optional[AdminStatus] = None
    ) -> bool:
        """Edit an admin without touching their password."""
        await self.admin_auth.require_active_admin(requester_id)

        values: Dict[str, Any] = {}
        if name is not None:
            values["name"] = name.strip()
        if status is not None:
            values["status"] = AdminStatus(status)
            self._check_not_self_deactivation(requester_id, admin_id, values["status"])

        updated = await self.admin_repo.update(admin_id, values)
        if updated is None:
            return False

        logger.info(f"Admin {requester_id} updated admin {admin_id}")
        return True

    async def delete_admin(self, requester_id: uuid.UUID, admin_id: uuid.UUID) -> bool:
        """
        Delete another admin.

        Raises:
            BusinessRuleViolationError: If an admin tries to delete themselves
        """
        await self.admin_auth.require_active_admin(requester_id)

        if requester_id == admin_id:
            raise BusinessRuleViolationError("no_self_deletion", "Admins cannot delete their own account")

        deleted = await self.admin_repo.delete(admin_id)
        if deleted:
            logger.info(f"Admin {requester_id} deleted admin {admin_id}")
        return deleted

    async def get_admin(self, requester_id: uuid.UUID, admin_id: uuid.UUID) -> Admin:
        await self.admin_auth.require_active_admin(requester_id)

        admin = await self.admin_repo.get_by_id(admin_id)
        if admin is None:
            raise AdminNotFoundError(str(admin_id))
        return admin

    async def list_admins(self, requester_id: uuid.UUID) -> List[Admin]:
        await self.admin_auth.require_active_admin(requester_id)
        return await self.admin_repo.list_admins()

    def _check_not_self_deactivation(self, requester_id: uuid.UUID, admin_id: uuid.UUID, status: AdminStatus) -> None:
        if requester_id == admin_id and status != AdminStatus.ACTIVE:
            raise BusinessRuleViolationError("no_self_deactivation", "Admins cannot deactivate their own account")

    # Users

    async def list_users(
        self,
        requester_id: uuid.UUID,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Tuple[User, int]], int]:
        """
        List users newest first with their listing counts.

        Returns:
            Tuple of ((user, listed_properties) rows, total)
        """
        await self.admin_auth.require_active_admin(requester_id)
        return await self.user_repo.search_with_listing_counts(search=search, skip=skip, limit=limit)

    async def delete_user(self, requester_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """
        Delete a user together with their saved properties.
        The user's listings stay and show up without an owner.
        """
        await self.admin_auth.require_active_admin(requester_id)

        deleted = await self.user_repo.delete_with_saved_properties(user_id)
        if deleted:
            logger.info(f"Admin {requester_id} deleted user {user_id}")
        return deleted

    # Saved properties

    async def list_saved_properties(self, requester_id: uuid.UUID) -> List[Dict[str, Any]]:
        """
        Every bookmark with its property and user details.
        Missing rows read as "Unknown Property" and "Unknown User".
        """
        await self.admin_auth.require_active_admin(requester_id)

        rows = await self.saved_repo.list_all_enriched()
        return [
            {
                "id": saved.id,
                "user_id": saved.user_id,
                "property_id": saved.property_id,
                "created_at": saved.created_at,
                "property_title": title or "Unknown Property",
                "property_price": price,
                "property_type": property_type.value if property_type is not None else None,
                "user_email": user_email or "Unknown User",
                "user_name": user_name,
            }
            for saved, title, price, property_type, user_email, user_name in rows
        ]

    async def delete_saved_property(self, requester_id: uuid.UUID, saved_id: uuid.UUID) -> bool:
        await self.admin_auth.require_active_admin(requester_id)

        deleted = await self.saved_repo.delete(saved_id)
        if deleted:
            logger.info(f"Admin {requester_id} deleted saved property {saved_id}")
        return deleted

    # Dashboard

    async def get_dashboard_stats(self, requester_id: uuid.UUID) -> Dict[str, int]:
        """Totals plus users and properties created in the last 30 days."""
        await self.admin_auth.require_active_admin(requester_id)

        since = utcnow() - timedelta(days=RECENT_ACTIVITY_DAYS)
        return {
            "total_users": await self.user_repo.count(),
            "total_properties": await self.property_repo.count(),
            "total_saved_properties": await self.saved_repo.count(),
            "recent_users": await self.user_repo.count_created_since(since),
            "recent_properties": await self.property_repo.count_created_since(since),
        }
