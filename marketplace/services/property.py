"""
Property service for listings.

Owners create, edit and delete their own listings. Admin operations
(verification, the owner-joined listing, privileged update and delete)
first confirm the requester is an active admin.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError as PydanticValidationError
from marketplace.config import settings
from marketplace.repositories.property import PropertyRepository, PropertyWithOwner
from marketplace.models.property import Property
from marketplace.models.user import User
from marketplace.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    AdminPropertyUpdate,
    PropertyBrowseFilters,
)
from marketplace.services.admin_auth import AdminAuthService
from marketplace.utils.file_utils import FileStorage
from marketplace.utils.filters import (
    FilterOptions,
    LocationCoordinates,
    apply_filters,
    format_price_display,
    get_price_range_from_string,
    MAX_PRICE,
)
from marketplace.utils.exceptions import (
    PropertyNotFoundError,
    PropertyOwnershipError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

# Never writable through the admin update, whatever the payload contains
PROTECTED_COLUMNS = frozenset({"id", "user_id", "created_at", "updated_at"})

# Columns the admin update may set
ADMIN_MUTABLE_COLUMNS = frozenset(AdminPropertyUpdate.model_fields)


def pydantic_field_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into the API's field error shape."""
    return [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]) or None,
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


class PropertyService:
    """Business logic for property listings."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.admin_auth = AdminAuthService(db_session)
        self.storage = storage or FileStorage()

    def _reject_foreign_images(self, data: Dict[str, Any], property_id: Optional[uuid.UUID] = None) -> None:
        """Owners may only reference uploads stored for this listing."""
        urls = list(data.get("images") or [])
        if data.get("image_url"):
            urls.append(data["image_url"])

        foreign = self.storage.foreign_stored_urls(urls, property_id)
        if foreign:
            raise ValidationError(
                "Images must be uploaded to this property",
                field_errors=[{"field": "images", "message": f"Not an upload of this property: {url}"} for url in foreign],
            )

    # Owner operations

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a new listing owned by current_user.

        Raises:
            ValidationError: If the listing fails model validation
        """
        create_data = property_data.model_dump()
        self._reject_foreign_images(create_data)
        create_data["user_id"] = current_user.id
        if not create_data.get("image_url") and create_data.get("images"):
            create_data["image_url"] = create_data["images"][0]

        try:
            property_obj = await self.property_repo.create_property(create_data)
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def get_property(self, property_id: uuid.UUID, record_view: bool = False) -> PropertyWithOwner:
        """
        Get a listing with its owner's name and email.

        Args:
            property_id: UUID of the property
            record_view: Count this lookup as a detail page view

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        if record_view:
            await self.property_repo.record_view(property_id)

        row = await self.property_repo.get_with_owner(property_id)
        if row is None:
            raise PropertyNotFoundError(str(property_id))
        return row

    async def get_owned_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        """
        Get a listing the current user owns.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If someone else listed it
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))

        if property_obj.user_id != current_user.id:
            logger.warning(f"User {current_user.id} tried to modify property {property_id} they do not own")
            raise PropertyOwnershipError()

        return property_obj

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Apply an owner's edit. Only fields present in the request change.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If the user does not own the listing
            ValidationError: If images point at another listing's uploads
        """
        await self.get_owned_property(property_id, current_user)

        update_data = property_data.model_dump(exclude_unset=True)
        self._reject_foreign_images(update_data, property_id)
        updated = await self.property_repo.update(property_id, update_data, exclude_empty=False)
        if updated is None:
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Property {property_id} updated by owner {current_user.email}")
        return updated

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> bool:
        await self.get_owned_property(property_id, current_user)

        deleted = await self.property_repo.delete(property_id)
        if deleted:
            logger.info(f"Property {property_id} deleted by owner {current_user.email}")
        return deleted

    async def list_user_properties(self, current_user: User) -> List[Property]:
        return await self.property_repo.get_by_owner(current_user.id)

    async def browse_properties(self, filters: PropertyBrowseFilters) -> List[Dict[str, Any]]:
        """
        Browse listings with the in-memory filter pipeline.

        A named price_range takes precedence over min_price/max_price. When
        lat/lng are given, listings outside radius_km (default from settings)
        or without coordinates are dropped.

        Returns:
            Normalized property dictionaries, newest first, each with a price_display
        """
        price_range = None
        if filters.price_range:
            price_range = get_price_range_from_string(filters.price_range)
        elif filters.min_price is not None or filters.max_price is not None:
            price_range = (
                float(filters.min_price) if filters.min_price is not None else 0,
                float(filters.max_price) if filters.max_price is not None else MAX_PRICE,
            )

        location = None
        if filters.lat is not None and filters.lng is not None:
            location = LocationCoordinates(filters.lat, filters.lng)

        options = FilterOptions(
            property_type=filters.type,
            price_range=price_range,
            location=location,
            max_distance_km=filters.radius_km or settings.default_radius_km,
        )

        properties = await self.property_repo.list_newest()
        results = apply_filters([p.to_dict() for p in properties], options)
        for prop in results:
            prop["price_display"] = format_price_display(prop["price"])

        logger.debug(f"Browse returned {len(results)} of {len(properties)} properties")
        return results

    # Admin operations

    async def update_property_verification(
        self,
        requester_id: uuid.UUID,
        property_id: uuid.UUID,
        verified: bool
    ) -> bool:
        """
        Set a listing's verification flag.

        Setting the same value twice leaves the flag unchanged but still
        refreshes updated_at.

        Returns:
            False if the property does not exist

        Raises:
            NotActiveAdminError: If the requester is not an active admin
        """
        await self.admin_auth.require_active_admin(requester_id)

        updated = await self.property_repo.update(
            property_id, {"verification_status": bool(verified)}, exclude_empty=False
        )
        if updated is None:
            return False

        logger.info(f"Admin {requester_id} set verification of property {property_id} to {verified}")
        return True

    async def admin_get_all_properties_with_owners(self, requester_id: uuid.UUID) -> List[PropertyWithOwner]:
        """
        Every listing with owner name and email, newest first.
        Listings whose owner was deleted are included with empty owner fields.

        Raises:
            NotActiveAdminError: If the requester is not an active admin
        """
        await self.admin_auth.require_active_admin(requester_id)
        return await self.property_repo.list_with_owners()

    async def admin_update_property(
        self,
        requester_id: uuid.UUID,
        property_id: uuid.UUID,
        data: Dict[str, Any]
    ) -> bool:
        """
        Privileged update of a listing from a column/value mapping.

        id, user_id, created_at and updated_at are dropped from the input.
        Every other key must be an allow-listed column; values are validated
        and bound as parameters of a single UPDATE. updated_at is always
        refreshed, even when nothing else changes.

        Returns:
            False if the property does not exist

        Raises:
            NotActiveAdminError: If the requester is not an active admin
            ValidationError: For unknown columns or invalid values
        """
        await self.admin_auth.require_active_admin(requester_id)

        if not isinstance(data, dict):
            raise ValidationError("Update data must be an object of column/value pairs")

        candidate = {key: value for key, value in data.items() if key not in PROTECTED_COLUMNS}

        unknown = sorted(set(candidate) - ADMIN_MUTABLE_COLUMNS)
        if unknown:
            raise ValidationError(
                f"Unknown property fields: {', '.join(unknown)}",
                field_errors=[{"field": key, "message": "Field cannot be updated"} for key in unknown],
            )

        try:
            validated = AdminPropertyUpdate.model_validate(candidate)
        except PydanticValidationError as e:
            raise ValidationError("Invalid property data", field_errors=pydantic_field_errors(e))

        update_data = validated.model_dump(exclude_unset=True)
        updated = await self.property_repo.update(property_id, update_data, exclude_empty=False)
        if updated is None:
            return False

        logger.info(
            f"Admin {requester_id} updated property {property_id}: {', '.join(sorted(update_data)) or 'timestamp only'}"
        )
        return True

    async def admin_delete_property(self, requester_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Privileged delete of any listing.

        Returns:
            False if the property does not exist

        Raises:
            NotActiveAdminError: If the requester is not an active admin
        """
        await self.admin_auth.require_active_admin(requester_id)

        deleted = await self.property_repo.delete(property_id)
        if deleted:
            logger.info(f"Admin {requester_id} deleted property {property_id}")
        return deleted
