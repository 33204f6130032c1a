"""
Image service for listing photos.
Validates and stores uploads, then records their public URLs on the property.
"""

from typing import List, Optional, Tuple
from pathlib import Path
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.property import Property
from marketplace.models.user import User
from marketplace.repositories.property import PropertyRepository
from marketplace.services.property import PropertyService
from marketplace.utils.file_utils import FileStorage, FileValidator
from marketplace.utils.exceptions import ValidationError, NotFoundError, PropertyNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_PROPERTY = 20


class ImageService:
    """Service for managing listing images."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.storage = storage or FileStorage()
        self.property_service = PropertyService(db_session, self.storage)

    async def upload_property_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        current_user: User
    ) -> Tuple[Property, List[str]]:
        """
        Store uploaded images for a listing the user owns.

        All files are validated before any is written. The new URLs are
        appended to the listing's images and the first image becomes the
        primary image when none is set.

        Returns:
            Tuple of (updated property, URLs stored by this call)

        Raises:
            ValidationError: If a file is invalid or the image limit is exceeded
            PropertyOwnershipError: If the user does not own the listing
        """
        if not files:
            raise ValidationError("At least one image is required")

        property_obj = await self.property_service.get_owned_property(property_id, current_user)
        existing = list(property_obj.images or [])
        if len(existing) + len(files) > MAX_IMAGES_PER_PROPERTY:
            raise ValidationError(f"A property can have at most {MAX_IMAGES_PER_PROPERTY} images")

        validated = [await FileValidator.read_validated(file) for file in files]

        saved_paths: List[Path] = []
        try:
            for content, extension in validated:
                file_path = self.storage.generate_file_path(property_id, extension)
                await self.storage.save_bytes(content, file_path)
                saved_paths.append(file_path)

            new_urls = [self.storage.public_url(path) for path in saved_paths]
            images = existing + new_urls
            updated = await self.property_repo.update(
                property_id,
                {"images": images, "image_url": property_obj.image_url or images[0]},
                exclude_empty=False,
            )
        except Exception:
            for path in saved_paths:
                self.storage.delete_file(path)
            raise

        if updated is None:
            for path in saved_paths:
                self.storage.delete_file(path)
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Uploaded {len(new_urls)} images for property {property_id}")
        return updated, new_urls

    async def remove_property_image(
        self,
        property_id: uuid.UUID,
        image_url: str,
        current_user: User
    ) -> Property:
        """
        Remove one image from a listing and delete the stored file.
        The primary image moves to the next remaining image.

        Raises:
            NotFoundError: If the URL is not one of the listing's images
        """
        property_obj = await self.property_service.get_owned_property(property_id, current_user)
        images = list(property_obj.images or [])
        if image_url not in images and property_obj.image_url != image_url:
            raise NotFoundError("Image", image_url)

        remaining = [url for url in images if url != image_url]
        primary = property_obj.image_url
        if primary == image_url:
            primary = remaining[0] if remaining else None

        updated = await self.property_repo.update(
            property_id, {"images": remaining, "image_url": primary}, exclude_empty=False
        )
        if updated is None:
            raise PropertyNotFoundError(str(property_id))

        file_path = self.storage.path_from_public_url(image_url, property_id)
        if file_path is not None:
            self.storage.delete_file(file_path)
            self.storage.cleanup_property_directory(property_id)

        logger.info(f"Removed image from property {property_id}")
        return updated
