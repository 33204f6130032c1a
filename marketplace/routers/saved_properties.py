"""
Saved property (bookmark) endpoints for the current user.
"""

from fastapi import APIRouter, Depends, status, Path
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.saved_property import SavedPropertyService
from marketplace.schemas.property import PropertyResponse
from marketplace.schemas.saved_property import (
    SavedPropertyResponse,
    SavedPropertyWithListing,
    SavedPropertyListResponse,
)
from marketplace.schemas.error import error_responses
from marketplace.utils.dependencies import get_current_user, get_saved_property_service


router = APIRouter(prefix="/saved-properties", tags=["Saved Properties"])


@router.get(
    "",
    response_model=SavedPropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List saved properties",
    description="Bookmarked listings, most recently saved first",
    responses=error_responses(401)
)
async def list_saved_properties(
    current_user: User = Depends(get_current_user),
    saved_service: SavedPropertyService = Depends(get_saved_property_service)
) -> SavedPropertyListResponse:
    rows = await saved_service.list_saved(current_user)
    items = [
        SavedPropertyWithListing(
            id=saved.id,
            user_id=saved.user_id,
            property_id=saved.property_id,
            created_at=saved.created_at,
            property=PropertyResponse.model_validate(property_obj)
        )
        for saved, property_obj in rows
    ]
    return SavedPropertyListResponse(saved_properties=items, total=len(items))


@router.post(
    "/{property_id}",
    response_model=SavedPropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a property",
    responses=error_responses(401, 404, 409)
)
async def save_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    saved_service: SavedPropertyService = Depends(get_saved_property_service)
) -> SavedPropertyResponse:
    saved = await saved_service.save_property(property_id, current_user)
    return SavedPropertyResponse.model_validate(saved)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a saved property",
    responses=error_responses(401, 404)
)
async def unsave_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    saved_service: SavedPropertyService = Depends(get_saved_property_service)
) -> None:
    await saved_service.unsave_property(property_id, current_user)
