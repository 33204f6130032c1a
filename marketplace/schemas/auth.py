"""
Pydantic schemas for authentication requests and responses.
Covers user sign-up/login tokens and the admin session.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from marketplace.schemas.user import UserResponse
import uuid


class LoginRequest(BaseModel):
    """Login request schema, shared by users and admins."""

    email: EmailStr = Field(..., description="Account email address", examples=["admin@example.com"])
    password: str = Field(..., min_length=1, max_length=128, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[1800])


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(BaseModel):
    """Login response with the signed-in user and their tokens."""

    user: UserResponse
    tokens: TokenResponse


class AdminIdentity(BaseModel):
    """The public-safe admin fields returned by a credential lookup."""

    id: uuid.UUID
    email: EmailStr
    name: str


class AdminSessionResponse(BaseModel):
    """
    Admin login response.

    The client keeps only the opaque token; its 8-hour expiry is enforced
    when the token is decoded on each request.
    """

    admin: AdminIdentity
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Session lifetime in seconds", examples=[28800])
