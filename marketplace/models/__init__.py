"""
Database models for the Property Marketplace API.
Includes User, Admin, Property and SavedProperty models.
"""

from marketplace.models.user import User
from marketplace.models.admin import Admin, AdminStatus
from marketplace.models.property import Property, PropertyType
from marketplace.models.saved_property import SavedProperty

# Export all models for easy importing
__all__ = [
    "User",
    "Admin",
    "AdminStatus",
    "Property",
    "PropertyType",
    "SavedProperty",
]
