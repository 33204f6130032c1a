"""
Repository layer for data access operations.
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.admin import AdminRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.saved_property import SavedPropertyRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "AdminRepository",
    "PropertyRepository",
    "SavedPropertyRepository",
]
