"""
Pydantic schemas for property image uploads.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
import uuid


class ImageUploadResponse(BaseModel):
    property_id: uuid.UUID
    uploaded: List[str] = Field(..., description="Public URLs of the images stored by this request")
    images: List[str] = Field(..., description="All image URLs of the property after the upload")
    image_url: Optional[str] = Field(None, description="Primary image URL")


class ImageDeleteRequest(BaseModel):
    image_url: str = Field(..., description="Public URL of the image to remove")
