"""
Admin dashboard API endpoints.

Every route requires an admin session; the services re-check that the
admin is still active before touching any data.
"""

from fastapi import APIRouter, Depends, status, Query, Path, Body
from typing import Optional, List, Dict, Any
from uuid import UUID

from marketplace.models.admin import Admin
from marketplace.services.admin import AdminService
from marketplace.services.property import PropertyService
from marketplace.schemas.admin import (
    AdminCreate,
    AdminUpdate,
    AdminResponse,
    SavedPropertyAdminItem,
    SavedPropertyAdminListResponse,
    DashboardStats,
)
from marketplace.schemas.property import PropertyWithOwnerResponse, VerificationUpdate
from marketplace.schemas.user import AdminUserListItem, UserListResponse
from marketplace.schemas.error import error_responses
from marketplace.routers.properties import with_owner
from marketplace.utils.dependencies import (
    get_current_admin,
    get_admin_service,
    get_property_service,
)
from marketplace.utils.exceptions import (
    AdminNotFoundError,
    PropertyNotFoundError,
    UserNotFoundError,
    SavedPropertyNotFoundError,
)
from marketplace.config import settings


router = APIRouter(prefix="/admin", tags=["Admin"], responses=error_responses(401, 403))


# Admin accounts

@router.get("/admins", response_model=List[AdminResponse], summary="List admins")
async def list_admins(
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> List[AdminResponse]:
    admins = await admin_service.list_admins(current_admin.id)
    return [AdminResponse.model_validate(a) for a in admins]


@router.post(
    "/admins",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create admin",
    responses=error_responses(409, 422)
)
async def create_admin(
    admin_data: AdminCreate,
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    admin_id = await admin_service.create_admin(
        current_admin.id,
        admin_data.email,
        admin_data.name,
        admin_data.password,
        admin_data.status
    )
    return AdminResponse.model_validate(await admin_service.get_admin(current_admin.id, admin_id))


@router.put(
    "/admins/{admin_id}",
    response_model=AdminResponse,
    summary="Update admin",
    description="Change an admin's name and status. A non-empty password is re-hashed.",
    responses=error_responses(400, 404, 422)
)
async def update_admin(
    admin_data: AdminUpdate,
    admin_id: UUID = Path(..., description="Admin ID"),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    if admin_data.password:
        updated = await admin_service.update_admin_with_password(
            current_admin.id, admin_id, admin_data.name, admin_data.password, admin_data.status
        )
    else:
        updated = await admin_service.update_admin(
            current_admin.id, admin_id, name=admin_data.name, status=admin_data.status
        )

    if not updated:
        raise AdminNotFoundError(str(admin_id))
    return AdminResponse.model_validate(await admin_service.get_admin(current_admin.id, admin_id))


@router.delete(
    "/admins/{admin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete admin",
    responses=error_responses(400, 404)
)
async def delete_admin(
    admin_id: UUID = Path(..., description="Admin ID"),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> None:
    if not await admin_service.delete_admin(current_admin.id, admin_id):
        raise AdminNotFoundError(str(admin_id))


# Properties

@router.get(
    "/properties",
    response_model=List[PropertyWithOwnerResponse],
    summary="List all properties with owners"
)
async def list_properties(
    current_admin: Admin = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyWithOwnerResponse]:
    rows = await property_service.admin_get_all_properties_with_owners(current_admin.id)
    return [with_owner(row) for row in rows]


@router.patch(
    "/properties/{property_id}",
    response_model=PropertyWithOwnerResponse,
    summary="Update any property",
    description=(
        "Apply a column/value mapping to a listing. id, user_id, created_at and "
        "updated_at are ignored; unknown columns are rejected."
    ),
    responses=error_responses(404, 422)
)
async def update_property(
    data: Dict[str, Any] = Body(..., examples=[{"price": 30000, "verification_status": True}]),
    property_id: UUID = Path(..., description="Property ID"),
    current_admin: Admin = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyWithOwnerResponse:
    if not await property_service.admin_update_property(current_admin.id, property_id, data):
        raise PropertyNotFoundError(str(property_id))
    return with_owner(await property_service.get_property(property_id))


@router.patch(
    "/properties/{property_id}/verification",
    response_model=PropertyWithOwnerResponse,
    summary="Set property verification",
    responses=error_responses(404, 422)
)
async def set_property_verification(
    verification: VerificationUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_admin: Admin = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyWithOwnerResponse:
    updated = await property_service.update_property_verification(
        current_admin.id, property_id, verification.verification_status
    )
    if not updated:
        raise PropertyNotFoundError(str(property_id))
    return with_owner(await property_service.get_property(property_id))


@router.delete(
    "/properties/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete any property",
    responses=error_responses(404)
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_admin: Admin = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> None:
    if not await property_service.admin_delete_property(current_admin.id, property_id):
        raise PropertyNotFoundError(str(property_id))


# Users

@router.get("/users", response_model=UserListResponse, summary="List users")
async def list_users(
    search: Optional[str] = Query(None, description="Match against email, name or phone"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserListResponse:
    rows, total = await admin_service.list_users(current_admin.id, search=search, skip=skip, limit=limit)
    users = [
        AdminUserListItem.model_validate(user).model_copy(update={"listed_properties": listed})
        for user, listed in rows
    ]
    return UserListResponse(users=users, total=total, skip=skip, limit=limit)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description="Delete a user and their saved properties. Their listings remain.",
    responses=error_responses(404)
)
async def delete_user(
    user_id: UUID = Path(..., description="User ID"),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> None:
    if not await admin_service.delete_user(current_admin.id, user_id):
        raise UserNotFoundError(str(user_id))


# Saved properties

@router.get(
    "/saved-properties",
    response_model=SavedPropertyAdminListResponse,
    summary="List all saved properties"
)
async def list_saved_properties(
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> SavedPropertyAdminListResponse:
    rows = await admin_service.list_saved_properties(current_admin.id)
    return SavedPropertyAdminListResponse(
        saved_properties=[SavedPropertyAdminItem.model_validate(row) for row in rows],
        total=len(rows)
    )


@router.delete(
    "/saved-properties/{saved_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a saved property",
    responses=error_responses(404)
)
async def delete_saved_property(
    saved_id: UUID = Path(..., description="Saved property ID"),
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> None:
    if not await admin_service.delete_saved_property(current_admin.id, saved_id):
        raise SavedPropertyNotFoundError(str(saved_id))


# Dashboard

@router.get("/dashboard", response_model=DashboardStats, summary="Dashboard counters")
async def get_dashboard(
    current_admin: Admin = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> DashboardStats:
    return DashboardStats(**await admin_service.get_dashboard_stats(current_admin.id))
