"""
API routers for the Property Marketplace API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .saved_properties import router as saved_properties_router
from .admin_auth import router as admin_auth_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "properties_router",
    "saved_properties_router",
    "admin_auth_router",
    "admin_router",
]
