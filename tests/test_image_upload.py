"""
Tests for listing image validation, storage and the image service.
"""

import io
import pytest
import uuid
from pathlib import Path
from PIL import Image
from fastapi import UploadFile
from starlette.datastructures import Headers

from marketplace.models.property import Property
from marketplace.models.user import User
from marketplace.services.image import ImageService, MAX_IMAGES_PER_PROPERTY
from marketplace.utils.file_utils import FileValidator, FileStorage
from marketplace.utils.exceptions import (
    FileSizeExceededError,
    NotFoundError,
    PropertyOwnershipError,
    UnsupportedFileTypeError,
    ValidationError,
)


def create_test_image(width: int = 800, height: int = 600, format: str = "JPEG") -> bytes:
    """Create a test image in memory."""
    img = Image.new("RGB", (width, height), color="red")
    img_bytes = io.BytesIO()
    img.save(img_bytes, format=format)
    return img_bytes.getvalue()


def make_upload(content: bytes, filename: str = "photo.jpg", content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def storage(tmp_path: Path) -> FileStorage:
    return FileStorage(tmp_path, public_base_url="http://test")


@pytest.fixture
def image_service(db_session, storage: FileStorage) -> ImageService:
    return ImageService(db_session, storage=storage)


class TestFileValidator:
    """Test upload validation."""

    def test_extensions(self):
        assert FileValidator.validate_file_extension("Photo.JPG") == ".jpg"
        assert FileValidator.validate_file_extension("plan.webp") == ".webp"

        with pytest.raises(ValidationError, match="not supported"):
            FileValidator.validate_file_extension("notes.txt")
        with pytest.raises(ValidationError, match="extension"):
            FileValidator.validate_file_extension("README")

    def test_mime_types(self):
        assert FileValidator.validate_mime_type("image/png") == "image/png"

        with pytest.raises(UnsupportedFileTypeError):
            FileValidator.validate_mime_type("application/pdf")

    def test_file_size(self):
        assert FileValidator.validate_file_size(1024) == 1024

        with pytest.raises(ValidationError, match="empty"):
            FileValidator.validate_file_size(0)
        with pytest.raises(FileSizeExceededError):
            FileValidator.validate_file_size(2048, max_size=1024)

    def test_dimensions(self):
        assert FileValidator.validate_image_dimensions(800, 600) == (800, 600)

        with pytest.raises(ValidationError, match="minimum"):
            FileValidator.validate_image_dimensions(50, 600)
        with pytest.raises(ValidationError, match="maximum"):
            FileValidator.validate_image_dimensions(800, 20000)

    async def test_read_validated_accepts_real_image(self):
        content, extension = await FileValidator.read_validated(make_upload(create_test_image()))

        assert extension == ".jpg"
        assert content.startswith(b"\xff\xd8")

    async def test_read_validated_png(self):
        upload = make_upload(create_test_image(format="PNG"), "plan.png", "image/png")

        _, extension = await FileValidator.read_validated(upload)

        assert extension == ".png"

    async def test_extension_must_match_mime_type(self):
        with pytest.raises(ValidationError, match="doesn't match"):
            await FileValidator.read_validated(make_upload(create_test_image(), "photo.png", "image/jpeg"))

    async def test_content_must_match_mime_type(self):
        upload = make_upload(create_test_image(format="PNG"), "photo.jpg", "image/jpeg")

        with pytest.raises(ValidationError, match="doesn't match"):
            await FileValidator.read_validated(upload)

    async def test_rejects_non_image_content(self):
        with pytest.raises(ValidationError, match="Invalid image file"):
            await FileValidator.read_validated(make_upload(b"definitely not a jpeg"))

    async def test_rejects_tiny_image(self):
        with pytest.raises(ValidationError, match="minimum"):
            await FileValidator.read_validated(make_upload(create_test_image(40, 40)))


class TestFileStorage:
    """Test on-disk storage of listing images."""

    async def test_save_and_map_back(self, storage: FileStorage, tmp_path: Path):
        property_id = uuid.uuid4()
        path = storage.generate_file_path(property_id, ".jpg")

        assert await storage.save_bytes(b"abc", path) == 3

        url = storage.public_url(path)
        assert url.startswith(f"http://test/uploads/properties/{property_id}/")
        assert storage.path_from_public_url(url) == path.resolve()

    def test_foreign_and_escaping_urls_are_ignored(self, storage: FileStorage):
        assert storage.path_from_public_url("https://cdn.example.com/a.jpg") is None
        assert storage.path_from_public_url("http://test/uploads/../../etc/passwd") is None

    def test_url_scoped_to_listing(self, storage: FileStorage):
        own, other = uuid.uuid4(), uuid.uuid4()
        url = storage.public_url(storage.generate_file_path(other, ".jpg"))

        assert storage.path_from_public_url(url, other) is not None
        assert storage.path_from_public_url(url, own) is None
        assert storage.foreign_stored_urls([url, "https://cdn.example.com/a.jpg"], own) == [url]
        assert storage.foreign_stored_urls([url], other) == []

    async def test_cleanup_removes_empty_directory(self, storage: FileStorage):
        property_id = uuid.uuid4()
        path = storage.generate_file_path(property_id, ".jpg")
        await storage.save_bytes(b"abc", path)

        assert storage.delete_file(path) is True
        assert storage.delete_file(path) is False
        storage.cleanup_property_directory(property_id)

        assert not path.parent.exists()


class TestImageService:
    """Uploading and removing listing images."""

    async def test_upload_sets_images_and_primary(
        self, image_service: ImageService, test_user: User, test_property: Property
    ):
        updated, urls = await image_service.upload_property_images(
            test_property.id,
            [make_upload(create_test_image()), make_upload(create_test_image(format="PNG"), "b.png", "image/png")],
            test_user
        )

        assert len(urls) == 2
        assert updated.images == urls
        assert updated.image_url == urls[0]
        for url in urls:
            assert image_service.storage.path_from_public_url(url).exists()

    async def test_upload_appends_and_keeps_primary(
        self, image_service: ImageService, test_user: User, test_property: Property
    ):
        _, first = await image_service.upload_property_images(
            test_property.id, [make_upload(create_test_image())], test_user
        )
        updated, second = await image_service.upload_property_images(
            test_property.id, [make_upload(create_test_image())], test_user
        )

        assert updated.images == first + second
        assert updated.image_url == first[0]

    async def test_invalid_file_stores_nothing(
        self, image_service: ImageService, test_user: User, test_property: Property, tmp_path: Path
    ):
        with pytest.raises(ValidationError):
            await image_service.upload_property_images(
                test_property.id,
                [make_upload(create_test_image()), make_upload(b"broken", "b.jpg")],
                test_user
            )

        assert not (tmp_path / "properties" / str(test_property.id)).exists()

    async def test_upload_requires_ownership(
        self, image_service: ImageService, other_user: User, test_property: Property
    ):
        with pytest.raises(PropertyOwnershipError):
            await image_service.upload_property_images(
                test_property.id, [make_upload(create_test_image())], other_user
            )

    async def test_upload_requires_files(self, image_service: ImageService, test_user: User, test_property: Property):
        with pytest.raises(ValidationError, match="At least one image"):
            await image_service.upload_property_images(test_property.id, [], test_user)

    async def test_image_limit(
        self, image_service: ImageService, property_repository, test_user: User, test_property: Property
    ):
        await property_repository.update(
            test_property.id, {"images": [f"http://test/{i}.jpg" for i in range(MAX_IMAGES_PER_PROPERTY)]}
        )

        with pytest.raises(ValidationError, match="at most"):
            await image_service.upload_property_images(
                test_property.id, [make_upload(create_test_image())], test_user
            )

    async def test_remove_primary_image(
        self, image_service: ImageService, test_user: User, test_property: Property
    ):
        _, urls = await image_service.upload_property_images(
            test_property.id, [make_upload(create_test_image()), make_upload(create_test_image())], test_user
        )
        first_path = image_service.storage.path_from_public_url(urls[0])

        updated = await image_service.remove_property_image(test_property.id, urls[0], test_user)

        assert updated.images == [urls[1]]
        assert updated.image_url == urls[1]
        assert not first_path.exists()

    async def test_remove_last_image_clears_primary(
        self, image_service: ImageService, test_user: User, test_property: Property
    ):
        _, urls = await image_service.upload_property_images(
            test_property.id, [make_upload(create_test_image())], test_user
        )

        updated = await image_service.remove_property_image(test_property.id, urls[0], test_user)

        assert updated.images == []
        assert updated.image_url is None
        assert not image_service.storage.path_from_public_url(urls[0]).parent.exists()

    async def test_remove_unknown_image(
        self, image_service: ImageService, test_user: User, test_property: Property
    ):
        with pytest.raises(NotFoundError):
            await image_service.remove_property_image(test_property.id, "http://test/uploads/nope.jpg", test_user)
