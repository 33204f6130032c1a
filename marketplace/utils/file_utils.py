"""
File upload utilities for listing images.
Validates uploads with Pillow and stores them per listing with aiofiles.
"""

import io
import os
import uuid
from pathlib import Path
from typing import List, Optional, Tuple
from PIL import Image
import aiofiles
from fastapi import UploadFile

from marketplace.config import settings
from marketplace.utils.exceptions import (
    FileSizeExceededError,
    FileUploadError,
    UnsupportedFileTypeError,
    ValidationError,
)


class FileValidator:
    """Validation of uploaded listing images."""

    SUPPORTED_FORMATS = {
        "image/jpeg": [".jpg", ".jpeg"],
        "image/png": [".png"],
        "image/webp": [".webp"],
    }

    PIL_FORMATS = {
        "image/jpeg": "jpeg",
        "image/png": "png",
        "image/webp": "webp",
    }

    MIN_WIDTH = 100
    MIN_HEIGHT = 100
    MAX_WIDTH = 10000
    MAX_HEIGHT = 10000

    @classmethod
    def validate_file_extension(cls, filename: str) -> str:
        """
        Validate file extension.

        Returns:
            Lowercase file extension

        Raises:
            ValidationError: If extension is missing or not supported
        """
        if not filename:
            raise ValidationError("Filename is required")

        extension = Path(filename).suffix.lower()
        if not extension:
            raise ValidationError("File must have an extension")

        supported = [ext for extensions in cls.SUPPORTED_FORMATS.values() for ext in extensions]
        if extension not in supported:
            raise ValidationError(
                f"File extension '{extension}' not supported. "
                f"Supported extensions: {', '.join(supported)}"
            )
        return extension

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        allowed = [m for m in cls.SUPPORTED_FORMATS if m in settings.allowed_file_types]
        if mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type or "unknown", allowed)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        if file_size <= 0:
            raise ValidationError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)
        return file_size

    @classmethod
    def validate_image_dimensions(cls, width: int, height: int) -> Tuple[int, int]:
        if width < cls.MIN_WIDTH or height < cls.MIN_HEIGHT:
            raise ValidationError(
                f"Image ({width}x{height}px) is below the minimum of {cls.MIN_WIDTH}x{cls.MIN_HEIGHT}px"
            )
        if width > cls.MAX_WIDTH or height > cls.MAX_HEIGHT:
            raise ValidationError(
                f"Image ({width}x{height}px) exceeds the maximum of {cls.MAX_WIDTH}x{cls.MAX_HEIGHT}px"
            )
        return width, height

    @classmethod
    async def read_validated(cls, file: UploadFile) -> Tuple[bytes, str]:
        """
        Read an upload and validate it completely.

        Returns:
            Tuple of (file content, lowercase extension)

        Raises:
            ValidationError: If any validation fails
        """
        extension = cls.validate_file_extension(file.filename or "")
        mime_type = cls.validate_mime_type(file.content_type or "")

        if extension not in cls.SUPPORTED_FORMATS[mime_type]:
            raise ValidationError(f"File extension '{extension}' doesn't match MIME type '{mime_type}'")

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))

        try:
            with Image.open(io.BytesIO(content)) as img:
                cls.validate_image_dimensions(*img.size)
                pil_format = (img.format or "").lower()
                img.verify()
        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(f"Invalid image file: {str(e)}")

        if pil_format != cls.PIL_FORMATS[mime_type]:
            raise ValidationError(f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'")

        return content, extension


class FileStorage:
    """Stores listing images under <upload_dir>/properties/<property_id>/."""

    def __init__(self, base_dir: Optional[Path] = None, public_base_url: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

    def get_property_directory(self, property_id: uuid.UUID) -> Path:
        property_dir = self.base_dir / "properties" / str(property_id)
        property_dir.mkdir(parents=True, exist_ok=True)
        return property_dir

    def generate_file_path(self, property_id: uuid.UUID, extension: str) -> Path:
        return self.get_property_directory(property_id) / f"{uuid.uuid4()}{extension}"

    def public_url(self, file_path: Path) -> str:
        relative = file_path.relative_to(self.base_dir).as_posix()
        return f"{self.public_base_url}/uploads/{relative}"

    def is_stored_url(self, url: str) -> bool:
        return url.startswith(f"{self.public_base_url}/uploads/")

    def path_from_public_url(self, url: str, property_id: Optional[uuid.UUID] = None) -> Optional[Path]:
        """
        Map a public URL back to a stored file, None for foreign URLs.
        With property_id, only files in that listing's directory map.
        """
        if not self.is_stored_url(url):
            return None

        prefix = f"{self.public_base_url}/uploads/"
        candidate = (self.base_dir / url[len(prefix):]).resolve()
        if self.base_dir.resolve() not in candidate.parents:
            return None
        if property_id is not None:
            if candidate.parent != (self.base_dir / "properties" / str(property_id)).resolve():
                return None
        return candidate

    def foreign_stored_urls(self, urls: List[str], property_id: Optional[uuid.UUID] = None) -> List[str]:
        """Stored URLs in the list that do not belong to the given listing."""
        return [
            url for url in urls
            if self.is_stored_url(url)
            and (property_id is None or self.path_from_public_url(url, property_id) is None)
        ]

    async def save_bytes(self, content: bytes, file_path: Path) -> int:
        """
        Write file content to disk.

        Raises:
            FileUploadError: If the write fails
        """
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
            return len(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise FileUploadError(f"Failed to save file: {str(e)}")

    def delete_file(self, file_path: Path) -> bool:
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError:
            return False

    def cleanup_property_directory(self, property_id: uuid.UUID) -> None:
        """Remove a listing's image directory once it is empty."""
        property_dir = self.base_dir / "properties" / str(property_id)
        if property_dir.exists() and not os.listdir(property_dir):
            property_dir.rmdir()
