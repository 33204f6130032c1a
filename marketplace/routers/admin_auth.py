"""
Admin session endpoints.
"""

from fastapi import APIRouter, Depends, status
from marketplace.models.admin import Admin
from marketplace.services.admin_auth import AdminAuthService
from marketplace.schemas.auth import LoginRequest, AdminIdentity, AdminSessionResponse
from marketplace.schemas.error import error_responses
from marketplace.utils.dependencies import get_admin_auth_service, get_current_admin


router = APIRouter(prefix="/admin/auth", tags=["Admin Authentication"])


@router.post(
    "/login",
    response_model=AdminSessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin login",
    description="Verify admin credentials and start an 8-hour session",
    responses=error_responses(401, 422)
)
async def admin_login(
    login_data: LoginRequest,
    admin_auth_service: AdminAuthService = Depends(get_admin_auth_service)
) -> AdminSessionResponse:
    """
    Start an admin session.

    Unknown emails, inactive admins and wrong passwords all get the same 401.
    """
    identity, token = await admin_auth_service.login(login_data.email, login_data.password)
    return AdminSessionResponse(
        admin=AdminIdentity.model_validate(identity),
        access_token=token,
        token_type="bearer",
        expires_in=admin_auth_service.session_lifetime_seconds()
    )


@router.get(
    "/me",
    response_model=AdminIdentity,
    status_code=status.HTTP_200_OK,
    summary="Current admin",
    responses=error_responses(401, 403)
)
async def get_admin_me(current_admin: Admin = Depends(get_current_admin)) -> AdminIdentity:
    return AdminIdentity.model_validate(current_admin.to_public_dict())
