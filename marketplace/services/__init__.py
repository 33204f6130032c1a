"""
Service layer for business logic implementation.
"""

from .auth import AuthService
from .admin_auth import AdminAuthService
from .admin import AdminService
from .property import PropertyService
from .saved_property import SavedPropertyService
from .image import ImageService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "AdminAuthService",
    "AdminService",
    "PropertyService",
    "SavedPropertyService",
    "ImageService",
    "ErrorHandlerService",
]
