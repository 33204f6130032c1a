"""
Pydantic schemas for saved properties.
"""

from pydantic import BaseModel, ConfigDict
from typing import List
from datetime import datetime
from marketplace.schemas.property import PropertyResponse
import uuid


class SavedPropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    property_id: uuid.UUID
    created_at: datetime


class SavedPropertyWithListing(SavedPropertyResponse):
    property: PropertyResponse


class SavedPropertyListResponse(BaseModel):
    saved_properties: List[SavedPropertyWithListing]
    total: int
