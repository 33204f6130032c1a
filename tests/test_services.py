"""
Tests for service classes.
Tests user authentication, owner property operations, browsing and bookmarks.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal

from marketplace.models.property import Property, PropertyType
from marketplace.models.user import User
from marketplace.repositories.property import PropertyRepository
from marketplace.services.auth import AuthService
from marketplace.services.property import PropertyService
from marketplace.services.saved_property import SavedPropertyService
from marketplace.schemas.user import UserCreate
from marketplace.schemas.property import PropertyCreate, PropertyUpdate, PropertyBrowseFilters
from marketplace.utils.auth import create_access_token, create_refresh_token
from marketplace.utils.exceptions import (
    DuplicateResourceError,
    InactiveUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    TokenExpiredError,
    ValidationError,
)
from tests.conftest import PropertyFactory, TEST_PASSWORD


class TestAuthService:
    """Test AuthService functionality."""

    async def test_signup_returns_tokens(self, auth_service: AuthService):
        user, access_token, refresh_token = await auth_service.signup(UserCreate(
            email="Buyer@Example.com", password=TEST_PASSWORD, full_name="Priya Sharma"
        ))

        assert user.email == "buyer@example.com"
        assert (await auth_service.get_current_user(access_token)).id == user.id
        assert await auth_service.refresh_access_token(refresh_token)

    async def test_signup_duplicate_email(self, auth_service: AuthService, test_user: User):
        with pytest.raises(DuplicateResourceError):
            await auth_service.signup(UserCreate(
                email="OWNER@example.com", password=TEST_PASSWORD, full_name="Someone Else"
            ))

    async def test_login(self, auth_service: AuthService, test_user: User):
        user, access_token, refresh_token = await auth_service.login(test_user.email, TEST_PASSWORD)

        assert user.id == test_user.id
        assert access_token != refresh_token

    @pytest.mark.parametrize("email,password", [
        ("owner@example.com", "wrongpassword"),
        ("nobody@example.com", TEST_PASSWORD),
        ("inactive@example.com", TEST_PASSWORD),
    ])
    async def test_login_failures_look_the_same(
        self,
        auth_service: AuthService,
        test_user: User,
        test_inactive_user: User,
        email: str,
        password: str
    ):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(email, password)

    async def test_login_requires_both_fields(self, auth_service: AuthService):
        with pytest.raises(ValidationError, match="Email is required"):
            await auth_service.authenticate_user("  ", TEST_PASSWORD)
        with pytest.raises(ValidationError, match="Password is required"):
            await auth_service.authenticate_user("owner@example.com", "")

    async def test_refresh_token_cannot_be_used_as_access_token(self, auth_service: AuthService, test_user: User):
        refresh_token = create_refresh_token(test_user.id, test_user.email)

        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user(refresh_token)

    async def test_access_token_cannot_refresh(self, auth_service: AuthService, test_user: User):
        access_token = create_access_token(test_user.id, test_user.email)

        with pytest.raises(InvalidTokenError):
            await auth_service.refresh_access_token(access_token)

    async def test_expired_access_token(self, auth_service: AuthService, test_user: User):
        token = create_access_token(test_user.id, test_user.email, expires_delta=timedelta(seconds=-1))

        with pytest.raises(TokenExpiredError):
            await auth_service.get_current_user(token)

    async def test_inactive_user_token(self, auth_service: AuthService, test_inactive_user: User):
        token = create_refresh_token(test_inactive_user.id, test_inactive_user.email)

        with pytest.raises(InactiveUserError):
            await auth_service.refresh_access_token(token)

    async def test_token_for_deleted_user(self, auth_service: AuthService):
        token = create_access_token(uuid.uuid4(), "gone@example.com")

        with pytest.raises(InvalidTokenError, match="no longer exists"):
            await auth_service.get_current_user(token)

    async def test_garbage_token(self, auth_service: AuthService):
        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user("not-a-token")


class TestPropertyServiceOwner:
    """Owner operations on listings."""

    async def test_create_property(self, property_service: PropertyService, test_user: User):
        prop = await property_service.create_property(PropertyCreate(
            title="  Villa in Alibaug ",
            address="Nagaon Beach Road",
            price=Decimal("15000000"),
            type=PropertyType.SALE,
            images=["/uploads/a.jpg", "/uploads/b.jpg"],
        ), test_user)

        assert prop.user_id == test_user.id
        assert prop.title == "Villa in Alibaug"
        assert prop.image_url == "/uploads/a.jpg"
        assert prop.verification_status is False
        assert prop.views_count == 0

    async def test_get_property_with_owner(
        self, property_service: PropertyService, test_property: Property
    ):
        prop, owner_name, owner_email = await property_service.get_property(test_property.id)

        assert prop.id == test_property.id
        assert (owner_name, owner_email) == ("Asha Owner", "owner@example.com")

    async def test_get_property_records_view(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        test_property: Property
    ):
        await property_service.get_property(test_property.id, record_view=True)
        await property_service.get_property(test_property.id)

        assert (await property_repository.get_by_id(test_property.id, refresh=True)).views_count == 1

    async def test_get_missing_property(self, property_service: PropertyService):
        with pytest.raises(PropertyNotFoundError):
            await property_service.get_property(uuid.uuid4(), record_view=True)

    async def test_update_changes_only_sent_fields(
        self, property_service: PropertyService, test_user: User, test_property: Property
    ):
        updated = await property_service.update_property(
            test_property.id, PropertyUpdate(title="3BHK near Baner", description=None), test_user
        )

        assert updated.title == "3BHK near Baner"
        assert updated.description is None
        assert updated.price == Decimal("25000")
        assert updated.beds == 2

    async def test_update_requires_ownership(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        other_user: User,
        test_property: Property
    ):
        with pytest.raises(PropertyOwnershipError):
            await property_service.update_property(test_property.id, PropertyUpdate(title="Mine now"), other_user)

        assert (await property_repository.get_by_id(test_property.id, refresh=True)).title == "2BHK near Baner"

    async def test_update_missing_property(self, property_service: PropertyService, test_user: User):
        with pytest.raises(PropertyNotFoundError):
            await property_service.update_property(uuid.uuid4(), PropertyUpdate(title="x"), test_user)

    async def test_update_rejects_null_required_field(self):
        with pytest.raises(ValueError):
            PropertyUpdate(price=None)

    async def test_delete_property(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        test_user: User,
        other_user: User,
        test_property: Property
    ):
        with pytest.raises(PropertyOwnershipError):
            await property_service.delete_property(test_property.id, other_user)

        assert await property_service.delete_property(test_property.id, test_user) is True
        assert not await property_repository.exists(test_property.id)

    async def test_list_user_properties(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        test_user: User,
        other_user: User,
        test_property: Property
    ):
        await PropertyFactory.create_property(property_repository, other_user.id)

        mine = await property_service.list_user_properties(test_user)

        assert [p.id for p in mine] == [test_property.id]


class TestPropertyBrowse:
    """Browsing with the in-memory filters."""

    @pytest.fixture
    async def listings(self, property_repository: PropertyRepository, test_user: User):
        return [
            await PropertyFactory.create_property(
                property_repository, test_user.id, title="Studio in Andheri", price=Decimal("400000"),
                property_type=PropertyType.SALE, latitude=Decimal("19.1136"), longitude=Decimal("72.8697")
            ),
            await PropertyFactory.create_property(
                property_repository, test_user.id, title="2BHK in Kothrud", price=Decimal("2500000"),
                property_type=PropertyType.SALE, latitude=Decimal("18.5074"), longitude=Decimal("73.8077")
            ),
            await PropertyFactory.create_property(
                property_repository, test_user.id, title="Bungalow in Juhu", price=Decimal("15000000"),
                property_type=PropertyType.SALE
            ),
            await PropertyFactory.create_property(
                property_repository, test_user.id, title="Flat for rent in Bandra", price=Decimal("25000"),
                property_type=PropertyType.RENT, latitude=Decimal("19.0596"), longitude=Decimal("72.8295")
            ),
        ]

    async def test_browse_everything(self, property_service: PropertyService, listings):
        results = await property_service.browse_properties(PropertyBrowseFilters())

        assert len(results) == 4
        assert {r["title"] for r in results} == {p.title for p in listings}

    async def test_price_range_scenario(self, property_service: PropertyService, listings):
        empty = await property_service.browse_properties(
            PropertyBrowseFilters(type="sale", price_range="500000-2000000")
        )
        low = await property_service.browse_properties(PropertyBrowseFilters(type="sale", price_range="0-500000"))

        assert empty == []
        assert [r["title"] for r in low] == ["Studio in Andheri"]
        assert low[0]["price_display"] == "₹4,00,000"

    async def test_type_filter(self, property_service: PropertyService, listings):
        results = await property_service.browse_properties(PropertyBrowseFilters(type="rent"))

        assert [r["title"] for r in results] == ["Flat for rent in Bandra"]
        assert results[0]["price_display"] == "₹25,000"

    async def test_min_and_max_price(self, property_service: PropertyService, listings):
        results = await property_service.browse_properties(
            PropertyBrowseFilters(min_price=Decimal("400000"), max_price=Decimal("2500000"))
        )

        assert {r["title"] for r in results} == {"Studio in Andheri", "2BHK in Kothrud"}

    async def test_location_filter(self, property_service: PropertyService, listings):
        # Around Bandra: Andheri is about 6 km away, Pune and the unlocated listing drop out
        results = await property_service.browse_properties(PropertyBrowseFilters(lat=19.0596, lng=72.8295))

        assert {r["title"] for r in results} == {"Studio in Andheri", "Flat for rent in Bandra"}

    async def test_location_filter_custom_radius(self, property_service: PropertyService, listings):
        results = await property_service.browse_properties(
            PropertyBrowseFilters(lat=19.0596, lng=72.8295, radius_km=2)
        )

        assert [r["title"] for r in results] == ["Flat for rent in Bandra"]

    def test_filters_validation(self):
        with pytest.raises(ValueError):
            PropertyBrowseFilters(type="lease")
        with pytest.raises(ValueError):
            PropertyBrowseFilters(price_range="cheap")
        with pytest.raises(ValueError):
            PropertyBrowseFilters(lat=19.0)
        with pytest.raises(ValueError):
            PropertyBrowseFilters(min_price=Decimal("10"), max_price=Decimal("5"))


class TestSavedPropertyService:
    """Bookmarking listings."""

    async def test_save_and_list(
        self, saved_property_service: SavedPropertyService, other_user: User, test_property: Property
    ):
        saved = await saved_property_service.save_property(test_property.id, other_user)

        rows = await saved_property_service.list_saved(other_user)

        assert [(s.id, p.id) for s, p in rows] == [(saved.id, test_property.id)]
        assert await saved_property_service.is_saved(test_property.id, other_user) is True

    async def test_save_twice_conflicts(
        self, saved_property_service: SavedPropertyService, other_user: User, test_property: Property
    ):
        await saved_property_service.save_property(test_property.id, other_user)

        with pytest.raises(DuplicateResourceError):
            await saved_property_service.save_property(test_property.id, other_user)

    async def test_save_missing_property(self, saved_property_service: SavedPropertyService, other_user: User):
        with pytest.raises(PropertyNotFoundError):
            await saved_property_service.save_property(uuid.uuid4(), other_user)

    async def test_bookmarks_are_per_user(
        self,
        saved_property_service: SavedPropertyService,
        test_user: User,
        other_user: User,
        test_property: Property
    ):
        await saved_property_service.save_property(test_property.id, other_user)

        assert await saved_property_service.list_saved(test_user) == []
        with pytest.raises(NotFoundError):
            await saved_property_service.unsave_property(test_property.id, test_user)

    async def test_unsave(
        self, saved_property_service: SavedPropertyService, other_user: User, test_property: Property
    ):
        await saved_property_service.save_property(test_property.id, other_user)

        await saved_property_service.unsave_property(test_property.id, other_user)

        assert await saved_property_service.is_saved(test_property.id, other_user) is False
