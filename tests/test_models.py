"""
Tests for database models.
Tests model validation and business logic methods.
"""

import pytest
import uuid
from decimal import Decimal

from marketplace.models.user import User
from marketplace.models.admin import Admin, AdminStatus
from marketplace.models.property import Property, PropertyType
from marketplace.utils.auth import hash_password
from tests.conftest import TEST_PASSWORD


def build_property(**overrides) -> Property:
    data = {
        "title": "Sea facing 3BHK",
        "address": "Carter Road, Bandra",
        "price": Decimal("2500000"),
        "type": PropertyType.SALE,
        "user_id": uuid.uuid4(),
        "images": [],
    }
    data.update(overrides)
    return Property(**data)


class TestUserModel:
    """Test User model validation and methods."""

    def test_email_validation_normalizes(self):
        assert User.validate_email_format("Buyer@Example.COM") == "buyer@example.com"

    @pytest.mark.parametrize("email", ["invalid-email", "@example.com", "test@", ""])
    def test_email_validation_invalid(self, email):
        with pytest.raises(ValueError, match="Invalid email format"):
            User.validate_email_format(email)

    def test_password_round_trip(self):
        user = User(email="a@example.com", full_name="A", hashed_password="")
        user.set_password(TEST_PASSWORD)

        assert user.hashed_password != TEST_PASSWORD
        assert user.verify_password(TEST_PASSWORD) is True
        assert user.verify_password("wrongpassword") is False

    def test_to_dict_excludes_password(self):
        user = User(id=uuid.uuid4(), email="a@example.com", full_name="A",
                    hashed_password=hash_password(TEST_PASSWORD), is_active=True)

        data = user.to_dict()

        assert "hashed_password" not in data
        assert data["email"] == "a@example.com"


class TestAdminModel:
    """Test Admin model methods."""

    def test_is_active_follows_status(self):
        assert Admin(status=AdminStatus.ACTIVE).is_active is True
        assert Admin(status=AdminStatus.INACTIVE).is_active is False

    def test_password_is_salted(self):
        first = Admin(email="x@example.com", name="X")
        second = Admin(email="y@example.com", name="Y")
        first.set_password(TEST_PASSWORD)
        second.set_password(TEST_PASSWORD)

        assert first.password_hash != second.password_hash
        assert first.verify_password(TEST_PASSWORD)
        assert second.verify_password(TEST_PASSWORD)

    def test_public_dict_has_only_identity_fields(self):
        admin_id = uuid.uuid4()
        admin = Admin(id=admin_id, email="x@example.com", name="X", password_hash="secret",
                      status=AdminStatus.ACTIVE)

        assert admin.to_public_dict() == {"id": admin_id, "email": "x@example.com", "name": "X"}


class TestPropertyModel:
    """Test Property model validation."""

    def test_valid_property_passes(self):
        build_property(beds=3, baths=2, sqft=1400, mobile_number="9876543210",
                       latitude=Decimal("19.06"), longitude=Decimal("72.82")).validate_all()

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1"), None])
    def test_price_must_be_positive(self, price):
        with pytest.raises(ValueError, match="Price must be greater than 0"):
            build_property(price=price).validate_all()

    def test_title_and_address_required(self):
        with pytest.raises(ValueError, match="Title is required"):
            build_property(title="   ").validate_all()
        with pytest.raises(ValueError, match="Address is required"):
            build_property(address="").validate_all()

    def test_rooms_must_be_positive(self):
        with pytest.raises(ValueError, match="beds"):
            build_property(beds=0).validate_all()

    @pytest.mark.parametrize("mobile", ["12345", "98765432101", "98765abcde"])
    def test_mobile_number_must_be_ten_digits(self, mobile):
        with pytest.raises(ValueError, match="10 digits"):
            build_property(mobile_number=mobile).validate_all()

    def test_coordinates_range(self):
        with pytest.raises(ValueError, match="Latitude"):
            build_property(latitude=Decimal("91"), longitude=Decimal("0")).validate_all()
        with pytest.raises(ValueError, match="Longitude"):
            build_property(latitude=Decimal("0"), longitude=Decimal("-181")).validate_all()

    def test_to_dict_uses_plain_types(self):
        prop = build_property(id=uuid.uuid4(), price=Decimal("25000.00"), type=PropertyType.RENT,
                              latitude=Decimal("18.52"), longitude=Decimal("73.85"),
                              verification_status=False, views_count=0)

        data = prop.to_dict()

        assert data["price"] == 25000.0
        assert data["type"] == "rent"
        assert data["latitude"] == pytest.approx(18.52)
        assert data["images"] == []
