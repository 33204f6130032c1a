"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    LoginResponse,
    AdminIdentity,
    AdminSessionResponse,
)

from .user import (
    UserCreate,
    UserResponse,
    AdminUserListItem,
    UserListResponse,
)

from .admin import (
    AdminCreate,
    AdminUpdate,
    AdminResponse,
    SavedPropertyAdminItem,
    SavedPropertyAdminListResponse,
    DashboardStats,
)

from .property import (
    PropertyCreate,
    PropertyUpdate,
    AdminPropertyUpdate,
    VerificationUpdate,
    PropertyResponse,
    PropertyWithOwnerResponse,
    PropertyBrowseItem,
    PropertyBrowseResponse,
    PropertyBrowseFilters,
)

from .saved_property import (
    SavedPropertyResponse,
    SavedPropertyWithListing,
    SavedPropertyListResponse,
)

from .image import ImageUploadResponse, ImageDeleteRequest

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "LoginResponse",
    "AdminIdentity",
    "AdminSessionResponse",
    "UserCreate",
    "UserResponse",
    "AdminUserListItem",
    "UserListResponse",
    "AdminCreate",
    "AdminUpdate",
    "AdminResponse",
    "SavedPropertyAdminItem",
    "SavedPropertyAdminListResponse",
    "DashboardStats",
    "PropertyCreate",
    "PropertyUpdate",
    "AdminPropertyUpdate",
    "VerificationUpdate",
    "PropertyResponse",
    "PropertyWithOwnerResponse",
    "PropertyBrowseItem",
    "PropertyBrowseResponse",
    "PropertyBrowseFilters",
    "SavedPropertyResponse",
    "SavedPropertyWithListing",
    "SavedPropertyListResponse",
    "ImageUploadResponse",
    "ImageDeleteRequest",
]
