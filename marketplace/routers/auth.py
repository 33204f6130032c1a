"""
Authentication API endpoints for marketplace users.
Sign-up, login, token refresh and the current user.
"""

from fastapi import APIRouter, Depends, status
from marketplace.models.user import User
from marketplace.services.auth import AuthService
from marketplace.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    TokenResponse,
)
from marketplace.schemas.user import UserCreate, UserResponse
from marketplace.schemas.error import error_responses
from marketplace.utils.dependencies import get_auth_service, get_current_user
from marketplace.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _login_response(user: User, access_token: str, refresh_token: str) -> LoginResponse:
    return LoginResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60
        )
    )


@router.post(
    "/signup",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="User sign-up",
    description="Register a new account and return JWT tokens",
    responses=error_responses(409, 422)
)
async def signup(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    user, access_token, refresh_token = await auth_service.signup(user_data)
    return _login_response(user, access_token, refresh_token)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns JWT tokens",
    responses=error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        InvalidCredentialsError: For any failed sign-in
    """
    user, access_token, refresh_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _login_response(user, access_token, refresh_token)


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=error_responses(401, 403)
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)
    return AccessTokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    responses=error_responses(401, 403)
)
async def get_current_user_info(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
