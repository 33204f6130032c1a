"""
Property listing API endpoints.
Public browsing and detail pages, owner CRUD and listing images.
"""

from fastapi import APIRouter, Depends, status, Query, Path, UploadFile, File
from pydantic import ValidationError as PydanticValidationError
from typing import Optional, List
from decimal import Decimal
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.property import PropertyService, pydantic_field_errors
from marketplace.services.image import ImageService
from marketplace.repositories.property import PropertyWithOwner
from marketplace.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyWithOwnerResponse,
    PropertyBrowseItem,
    PropertyBrowseResponse,
    PropertyBrowseFilters,
)
from marketplace.schemas.image import ImageUploadResponse, ImageDeleteRequest
from marketplace.schemas.error import error_responses
from marketplace.utils.dependencies import (
    get_current_user,
    get_property_service,
    get_image_service,
)
from marketplace.utils.exceptions import PropertyNotFoundError, ValidationError


router = APIRouter(prefix="/properties", tags=["Properties"])


def with_owner(row: PropertyWithOwner) -> PropertyWithOwnerResponse:
    """Build the response for a (property, owner_name, owner_email) row."""
    property_obj, owner_name, owner_email = row
    return PropertyWithOwnerResponse.model_validate(property_obj).model_copy(
        update={"owner_name": owner_name, "owner_email": owner_email}
    )


async def get_browse_filters(
    type: str = Query("all", description="all, sale or rent"),
    price_range: Optional[str] = Query(None, description="Price range identifier, e.g. 500000-2000000"),
    min_price: Optional[Decimal] = Query(None, description="Minimum price, ignored when price_range is set"),
    max_price: Optional[Decimal] = Query(None, description="Maximum price, ignored when price_range is set"),
    lat: Optional[float] = Query(None, description="Search center latitude"),
    lng: Optional[float] = Query(None, description="Search center longitude"),
    radius_km: Optional[float] = Query(None, description="Search radius in km around lat/lng"),
) -> PropertyBrowseFilters:
    try:
        return PropertyBrowseFilters(
            type=type,
            price_range=price_range,
            min_price=min_price,
            max_price=max_price,
            lat=lat,
            lng=lng,
            radius_km=radius_km,
        )
    except PydanticValidationError as e:
        raise ValidationError("Invalid browse filters", field_errors=pydantic_field_errors(e))


@router.get(
    "",
    response_model=PropertyBrowseResponse,
    status_code=status.HTTP_200_OK,
    summary="Browse properties",
    description="List properties newest first, filtered by type, price and distance",
    responses=error_responses(422)
)
async def browse_properties(
    filters: PropertyBrowseFilters = Depends(get_browse_filters),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyBrowseResponse:
    """
    Browse listings.

    Without lat/lng every listing is eligible. With them, listings farther
    than radius_km or without coordinates are left out.
    """
    results = await property_service.browse_properties(filters)
    return PropertyBrowseResponse(
        properties=[PropertyBrowseItem.model_validate(prop) for prop in results],
        total=len(results)
    )


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a listing owned by the current user",
    responses=error_responses(401, 422)
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, current_user)
    return PropertyResponse.model_validate(property_obj)


@router.get(
    "/mine",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List my properties",
    responses=error_responses(401)
)
async def list_my_properties(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_user_properties(current_user)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyWithOwnerResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    description="Get a listing with its owner's contact details. Each request counts as a view.",
    responses=error_responses(404)
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyWithOwnerResponse:
    row = await property_service.get_property(property_id, record_view=True)
    return with_owner(row)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Update a listing. Only its owner can update it.",
    responses=error_responses(401, 403, 404, 422)
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    updated = await property_service.update_property(property_id, property_data, current_user)
    return PropertyResponse.model_validate(updated)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a listing. Only its owner can delete it.",
    responses=error_responses(401, 403, 404)
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> None:
    deleted = await property_service.delete_property(property_id, current_user)
    if not deleted:
        raise PropertyNotFoundError(str(property_id))


@router.post(
    "/{property_id}/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload property images",
    description="Upload JPEG, PNG or WebP images up to 5MB each to a listing you own",
    responses=error_responses(400, 401, 403, 404, 422)
)
async def upload_property_images(
    property_id: UUID = Path(..., description="Property ID"),
    files: List[UploadFile] = File(..., description="Image files to upload"),
    current_user: User = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service)
) -> ImageUploadResponse:
    property_obj, uploaded = await image_service.upload_property_images(property_id, files, current_user)
    return ImageUploadResponse(
        property_id=property_obj.id,
        uploaded=uploaded,
        images=list(property_obj.images or []),
        image_url=property_obj.image_url
    )


@router.delete(
    "/{property_id}/images",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove a property image",
    responses=error_responses(401, 403, 404)
)
async def remove_property_image(
    request: ImageDeleteRequest,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    image_service: ImageService = Depends(get_image_service)
) -> PropertyResponse:
    updated = await image_service.remove_property_image(property_id, request.image_url, current_user)
    return PropertyResponse.model_validate(updated)
