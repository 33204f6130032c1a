"""
Exception hierarchy for the Property Marketplace API.

Each class carries its HTTP status and a stable error code; the error handler
turns any of them into the {"error": {...}} envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base class. Subclasses set status_code and error_code as class defaults."""

    default_status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error_code: str = "API_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=self.default_status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.default_error_code


class ValidationError(APIException):
    """Invalid input, optionally with per-field errors."""

    default_status_code = 422
    default_error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    default_status_code = status.HTTP_404_NOT_FOUND
    default_error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"
        super().__init__(detail)


class UnauthorizedError(APIException):
    """Missing or unusable credentials. Always asks for a bearer token."""

    default_status_code = status.HTTP_401_UNAUTHORIZED
    default_error_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    default_status_code = status.HTTP_403_FORBIDDEN
    default_error_code = "FORBIDDEN"

    def __init__(self, detail: str = "Access forbidden", error_code: Optional[str] = None):
        super().__init__(detail, error_code=error_code)


class ConflictError(APIException):
    default_status_code = status.HTTP_409_CONFLICT
    default_error_code = "CONFLICT"


class BadRequestError(APIException):
    default_status_code = status.HTTP_400_BAD_REQUEST
    default_error_code = "BAD_REQUEST"


# Sign-in and sessions
class InvalidCredentialsError(UnauthorizedError):
    """Same message for unknown email, inactive account and wrong password."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class TokenExpiredError(UnauthorizedError):
    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class InactiveUserError(ForbiddenError):
    def __init__(self, detail: str = "User account is inactive"):
        super().__init__(detail)


class NotActiveAdminError(ForbiddenError):
    """Raised by every privileged operation when the requester is not an active admin."""

    def __init__(self, detail: str = "Permission denied: requester is not an active admin"):
        super().__init__(detail, error_code="PERMISSION_DENIED")


# Missing records
class PropertyNotFoundError(NotFoundError):
    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class AdminNotFoundError(NotFoundError):
    def __init__(self, admin_id: str):
        super().__init__("Admin", admin_id)


class SavedPropertyNotFoundError(NotFoundError):
    def __init__(self, saved_id: str):
        super().__init__("Saved property", saved_id)


class PropertyOwnershipError(ForbiddenError):
    """A user tried to change a listing somebody else owns."""

    def __init__(self, detail: str = "You don't own this property"):
        super().__init__(detail)


# Business rules
class BusinessRuleViolationError(BadRequestError):
    def __init__(self, rule: str, detail: Optional[str] = None):
        message = f"Business rule violation: {rule}"
        if detail:
            message += f" - {detail}"
        super().__init__(message)


class DuplicateResourceError(ConflictError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


# Image uploads
class FileUploadError(BadRequestError):
    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(BadRequestError):
    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(BadRequestError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")
