"""
Admin repository.
Data access for the admins table; authorization decisions live in the services.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marketplace.repositories.base import BaseRepository
from marketplace.models.admin import Admin, AdminStatus
from marketplace.database import utcnow
from marketplace.utils.auth import hash_password
from typing import Optional, List
import uuid
import logging

logger = logging.getLogger(__name__)


class AdminRepository(BaseRepository[Admin]):
    """Repository for administrator accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(Admin, db)

    async def get_by_email(self, email: str) -> Optional[Admin]:
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(Admin).where(Admin.email == normalized_email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get admin by email: {e}")
            raise

    async def get_active_by_email(self, email: str) -> Optional[Admin]:
        """Return the admin with this email only if their status is active."""
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(
                select(Admin).where(
                    Admin.email == normalized_email,
                    Admin.status == AdminStatus.ACTIVE,
                )
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get active admin by email: {e}")
            raise

    async def is_active(self, admin_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                select(func.count(Admin.id)).where(
                    Admin.id == admin_id,
                    Admin.status == AdminStatus.ACTIVE,
                )
            )
            return (result.scalar() or 0) > 0
        except Exception as e:
            logger.error(f"Failed to check admin status for {admin_id}: {e}")
            raise

    async def create_admin(
        self,
        email: str,
        name: str,
        password: str,
        status: AdminStatus = AdminStatus.ACTIVE
    ) -> Admin:
        """
        Insert an admin row with a freshly hashed password.

        Raises:
            ValueError: If the password is too short or the email is taken
        """
        normalized_email = email.lower().strip()
        if await self.get_by_email(normalized_email):
            raise ValueError(f"Admin with email {normalized_email} already exists")

        admin = await self.create({
            "email": normalized_email,
            "name": name.strip(),
            "password_hash": hash_password(password),
            "status": status,
        })
        logger.info(f"Created admin: {admin.email} (ID: {admin.id})")
        return admin

    async def touch_last_login(self, admin_id: uuid.UUID) -> Optional[Admin]:
        return await self.update(admin_id, {"last_login": utcnow()})

    async def list_admins(self) -> List[Admin]:
        return await self.get_multi(limit=None, order_by="-created_at")

    async def upsert_bootstrap_admin(self, email: str, name: str, password: str) -> Admin:
        """
        Ensure the bootstrap admin exists, is active and has the given password.
        Used by the seed command only.
        """
        existing = await self.get_by_email(email)
        if existing is None:
            return await self.create_admin(email, name, password, AdminStatus.ACTIVE)

        admin = await self.update(existing.id, {
            "name": name.strip(),
            "password_hash": hash_password(password),
            "status": AdminStatus.ACTIVE,
        })
        logger.info(f"Reset bootstrap admin: {admin.email}")
        return admin
