"""
Admin credential verification and session handling.

Credential checks never reveal which part failed: an unknown email, an
inactive account and a wrong password all produce the same empty result.
Privileged services call require_active_admin before any data access.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.repositories.admin import AdminRepository
from marketplace.models.admin import Admin
from marketplace.utils import auth as auth_utils
from marketplace.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    NotActiveAdminError,
)
from jose import ExpiredSignatureError, JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AdminAuthService:
    """Credential verification, admin session tokens and the active-admin predicate."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.admin_repo = AdminRepository(db_session)

    @staticmethod
    def hash_password(password: str) -> str:
        """Salted one-way hash used for admin passwords."""
        return auth_utils.hash_password(password)

    async def verify_password(self, email: str, password: str) -> Optional[uuid.UUID]:
        """
        Verify admin credentials.

        Looks up an active admin by email and compares the password against
        the stored hash. On success last_login and updated_at are refreshed
        and the admin id is returned.

        Returns:
            The admin id, or None when the email is unknown, the admin is
            inactive or the password is wrong
        """
        admin = await self.admin_repo.get_active_by_email(email) if email and password else None
        if admin is None:
            # Spend the same hashing time as a real comparison
            auth_utils.pwd_context.dummy_verify()
        if admin is None or not admin.verify_password(password):
            logger.warning("Admin credential verification failed")
            return None

        await self.admin_repo.touch_last_login(admin.id)
        return admin.id

    async def get_admin_by_credentials(self, email: str, password: str) -> List[dict]:
        """
        Credential lookup returning the public-safe admin fields.

        Returns:
            A single-element list with {id, email, name}, or an empty list
            when verification failed
        """
        admin_id = await self.verify_password(email, password)
        if admin_id is None:
            return []

        admin = await self.admin_repo.get_by_id(admin_id)
        return [admin.to_public_dict()] if admin else []

    async def is_active_admin(self, admin_id: Optional[uuid.UUID]) -> bool:
        if admin_id is None:
            return False
        return await self.admin_repo.is_active(admin_id)

    async def require_active_admin(self, admin_id: Optional[uuid.UUID]) -> None:
        """
        Raise unless admin_id belongs to an active admin.

        Raises:
            NotActiveAdminError: If the requester is unknown or inactive
        """
        if not await self.is_active_admin(admin_id):
            logger.warning(f"Privileged operation refused for requester {admin_id}")
            raise NotActiveAdminError()

    async def login(self, email: str, password: str) -> Tuple[dict, str]:
        """
        Start an admin session.

        Returns:
            Tuple of (admin identity, signed session token)

        Raises:
            InvalidCredentialsError: For any failed verification
        """
        rows = await self.get_admin_by_credentials(email, password)
        if not rows:
            raise InvalidCredentialsError()

        identity = rows[0]
        token = auth_utils.create_admin_session_token(identity["id"], identity["email"])
        logger.info(f"Admin signed in: {identity['email']}")
        return identity, token

    async def get_current_admin(self, token: str) -> Admin:
        """
        Resolve the admin behind a session token.

        Raises:
            TokenExpiredError: If the session is older than its lifetime
            InvalidTokenError: If the token is not a valid admin session
            NotActiveAdminError: If the admin was deleted or deactivated
        """
        try:
            payload = auth_utils.verify_token(token, token_type="access", kind=auth_utils.ADMIN_TOKEN)
        except ExpiredSignatureError:
            raise TokenExpiredError("Admin session has expired")
        except JWTError as e:
            raise InvalidTokenError(str(e))

        admin = await self.admin_repo.get_by_id(payload.subject_uuid)
        if admin is None or not admin.is_active:
            raise NotActiveAdminError()

        return admin

    @staticmethod
    def session_lifetime_seconds() -> int:
        return settings.admin_session_expire_hours * 3600
