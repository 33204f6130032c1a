"""
FastAPI dependency injection utilities for authentication and database sessions.
User tokens and admin session tokens are resolved by separate dependencies.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.database import get_db
from marketplace.models.admin import Admin
from marketplace.models.user import User
from marketplace.services.auth import AuthService
from marketplace.services.admin_auth import AdminAuthService
from marketplace.services.admin import AdminService
from marketplace.services.property import PropertyService
from marketplace.services.saved_property import SavedPropertyService
from marketplace.services.image import ImageService
from marketplace.utils.exceptions import UnauthorizedError

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_admin_auth_service(db: AsyncSession = Depends(get_db)) -> AdminAuthService:
    return AdminAuthService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_saved_property_service(db: AsyncSession = Depends(get_db)) -> SavedPropertyService:
    return SavedPropertyService(db)


async def get_image_service(db: AsyncSession = Depends(get_db)) -> ImageService:
    return ImageService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided
        InvalidTokenError: If token is invalid
        TokenExpiredError: If token is expired
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    admin_auth_service: AdminAuthService = Depends(get_admin_auth_service)
) -> Admin:
    """
    Resolve the admin behind an admin session token.

    Raises:
        UnauthorizedError: If no token provided
        TokenExpiredError: If the 8-hour session has lapsed
        InvalidTokenError: If the token is not an admin session
        NotActiveAdminError: If the admin was deleted or deactivated
    """
    if not credentials:
        raise UnauthorizedError("Admin session token required")

    return await admin_auth_service.get_current_admin(credentials.credentials)
