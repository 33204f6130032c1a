"""
Authentication service for marketplace users.
Handles sign-up, login, token refresh and resolving the current user from a token.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User
from marketplace.schemas.user import UserCreate
from marketplace.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
    USER_TOKEN,
)
from marketplace.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    ValidationError,
    DuplicateResourceError,
)
from jose import ExpiredSignatureError, JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for marketplace users.
    Admin sessions are handled separately by AdminAuthService.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def signup(self, user_data: UserCreate) -> Tuple[User, str, str]:
        """
        Register a new user and sign them in.

        Returns:
            Tuple of (user, access_token, refresh_token)

        Raises:
            DuplicateResourceError: If the email is already registered
            ValidationError: If the data fails model validation
        """
        if await self.user_repo.get_by_email(user_data.email):
            raise DuplicateResourceError("User", user_data.email)

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"User signed up: {user.email}")
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: For unknown email, inactive account or wrong password alike
            ValidationError: If input validation fails
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        if not password:
            raise ValidationError("Password is required")

        user = await self.user_repo.authenticate_user(email, password)
        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """Create access and refresh tokens for user."""
        access_token = create_access_token(user_id=user.id, email=user.email)
        refresh_token = create_refresh_token(user_id=user.id, email=user.email)
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            InactiveUserError: If user account is inactive
        """
        user = await self._resolve_user(refresh_token, token_type="refresh")
        return create_access_token(user_id=user.id, email=user.email)

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or the user no longer exists
            TokenExpiredError: If token is expired
            InactiveUserError: If user account is inactive
        """
        return await self._resolve_user(token, token_type="access")

    async def _resolve_user(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type, kind=USER_TOKEN)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            raise InvalidTokenError(str(e))

        user = await self.user_repo.get_by_id(uuid.UUID(payload.subject_id))
        if not user:
            raise InvalidTokenError("User no longer exists")

        if not user.is_active:
            raise InactiveUserError()

        return user
