"""
Test configuration and fixtures for the property marketplace API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read once at import time, so the test environment must be in place first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="marketplace-uploads-"))

import pytest
import uuid
from typing import AsyncGenerator, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from marketplace.main import app
from marketplace.config import settings
from marketplace.database import Base, get_db
from marketplace.models.user import User
from marketplace.models.admin import Admin, AdminStatus
from marketplace.models.property import Property, PropertyType
from marketplace.repositories.user import UserRepository
from marketplace.repositories.admin import AdminRepository
from marketplace.repositories.property import PropertyRepository
from marketplace.repositories.saved_property import SavedPropertyRepository
from marketplace.services.auth import AuthService
from marketplace.services.admin_auth import AdminAuthService
from marketplace.services.admin import AdminService
from marketplace.services.property import PropertyService
from marketplace.services.saved_property import SavedPropertyService
from marketplace.utils.auth import create_access_token, create_admin_session_token


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async test client whose requests share the test's database session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def admin_repository(db_session: AsyncSession) -> AdminRepository:
    return AdminRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def saved_property_repository(db_session: AsyncSession) -> SavedPropertyRepository:
    return SavedPropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def admin_auth_service(db_session: AsyncSession) -> AdminAuthService:
    return AdminAuthService(db_session)


@pytest.fixture
def admin_service(db_session: AsyncSession) -> AdminService:
    return AdminService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def saved_property_service(db_session: AsyncSession) -> SavedPropertyService:
    return SavedPropertyService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        full_name: str = "Test User",
        phone: Optional[str] = None,
        is_active: bool = True
    ) -> dict:
        return {
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "phone": phone,
            "is_active": is_active
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class AdminFactory:
    """Factory for creating test admins."""

    @staticmethod
    async def create_admin(
        admin_repo: AdminRepository,
        email: Optional[str] = None,
        name: str = "Test Admin",
        password: str = TEST_PASSWORD,
        status: AdminStatus = AdminStatus.ACTIVE
    ) -> Admin:
        return await admin_repo.create_admin(
            email or f"admin{uuid.uuid4().hex[:8]}@example.com",
            name,
            password,
            status
        )


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        user_id: uuid.UUID,
        title: str = "Test Property",
        description: str = "A bright test property",
        address: str = "12 Test Road, Pune",
        price: Decimal = Decimal("25000"),
        property_type: PropertyType = PropertyType.RENT,
        beds: Optional[int] = 2,
        baths: Optional[int] = 1,
        sqft: Optional[int] = 900,
        mobile_number: Optional[str] = "9876543210",
        latitude: Optional[Decimal] = None,
        longitude: Optional[Decimal] = None,
        images: Optional[list] = None
    ) -> dict:
        return {
            "user_id": user_id,
            "title": title,
            "description": description,
            "address": address,
            "price": price,
            "type": property_type,
            "beds": beds,
            "baths": baths,
            "sqft": sqft,
            "mobile_number": mobile_number,
            "latitude": latitude,
            "longitude": longitude,
            "images": images or [],
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, user_id: uuid.UUID, **kwargs) -> Property:
        return await property_repo.create_property(PropertyFactory.create_property_data(user_id, **kwargs))


# Common test fixtures
@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="owner@example.com",
        full_name="Asha Owner",
        phone="9876543210"
    )


@pytest.fixture
async def other_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="other@example.com",
        full_name="Ravi Other"
    )


@pytest.fixture
async def test_inactive_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="inactive@example.com",
        full_name="Inactive User",
        is_active=False
    )


@pytest.fixture
async def test_admin(admin_repository: AdminRepository) -> Admin:
    return await AdminFactory.create_admin(admin_repository, email="moderator@example.com", name="Moderator")


@pytest.fixture
async def inactive_admin(admin_repository: AdminRepository) -> Admin:
    return await AdminFactory.create_admin(
        admin_repository,
        email="retired@example.com",
        name="Retired Admin",
        status=AdminStatus.INACTIVE
    )


@pytest.fixture
async def seeded_admin(admin_repository: AdminRepository) -> Admin:
    """The bootstrap admin exactly as the seed command creates it."""
    return await admin_repository.upsert_bootstrap_admin(
        settings.bootstrap_admin_email,
        settings.bootstrap_admin_name,
        settings.bootstrap_admin_password
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_user: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        test_user.id,
        title="2BHK near Baner",
        price=Decimal("25000"),
        property_type=PropertyType.RENT
    )


@pytest.fixture
def user_token(test_user: User) -> str:
    return create_access_token(test_user.id, test_user.email)


@pytest.fixture
def other_user_token(other_user: User) -> str:
    return create_access_token(other_user.id, other_user.email)


@pytest.fixture
def admin_token(test_admin: Admin) -> str:
    return create_admin_session_token(test_admin.id, test_admin.email)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
