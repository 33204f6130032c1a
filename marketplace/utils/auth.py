"""
Authentication utilities for JWT token management and password hashing.
Issues separate token kinds for marketplace users and for admin sessions.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from marketplace.config import settings
import uuid


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

USER_TOKEN = "user"
ADMIN_TOKEN = "admin"


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, subject_id: str, email: str, kind: str, exp: datetime):
        self.subject_id = subject_id
        self.email = email
        self.kind = kind
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            subject_id=data["sub"],
            email=data["email"],
            kind=data["kind"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )

    @property
    def subject_uuid(self) -> uuid.UUID:
        return uuid.UUID(self.subject_id)


def _encode(claims: Dict[str, Any], expires_in: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        **claims,
        "exp": now + expires_in,
        "iat": now,
    }
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token for a marketplace user.

    Args:
        user_id: User's UUID
        email: User's email address
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    return _encode(
        {"sub": str(user_id), "email": email, "kind": USER_TOKEN, "type": "access"},
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )


def create_refresh_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT refresh token for a marketplace user.

    Args:
        user_id: User's UUID
        email: User's email address
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT refresh token string
    """
    return _encode(
        {"sub": str(user_id), "email": email, "kind": USER_TOKEN, "type": "refresh"},
        expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days)
    )


def create_admin_session_token(
    admin_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create the signed admin session token.

    The expiry lives inside the signed claims and is checked on every
    request, so a client cannot extend its own session.
    """
    return _encode(
        {"sub": str(admin_id), "email": email, "kind": ADMIN_TOKEN, "type": "access"},
        expires_delta or timedelta(hours=settings.admin_session_expire_hours)
    )


def verify_token(token: str, token_type: str = "access", kind: str = USER_TOKEN) -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")
        kind: Expected subject kind ("user" or "admin")

    Returns:
        TokenPayload for a valid token

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")

    if payload.get("type") != token_type:
        raise JWTError(f"Invalid token type. Expected {token_type}")

    if payload.get("kind") != kind:
        raise JWTError(f"Invalid token kind. Expected {kind}")

    if not payload.get("sub") or not payload.get("email"):
        raise JWTError("Invalid token payload")

    try:
        uuid.UUID(payload["sub"])
    except ValueError:
        raise JWTError("Invalid token subject")

    return TokenPayload.from_dict(payload)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is too short
    """
    if not password or len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
