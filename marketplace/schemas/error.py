"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["price"])
    message: str = Field(..., description="Human-readable error message", examples=["Price must be greater than 0"])
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])
    input: Optional[Any] = Field(None, description="Input value that caused the error")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["PERMISSION_DENIED"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format", examples=["2024-08-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking", examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = Field(None, description="Detailed error information for validation errors")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "application/json": {
            "example": {
                "error": {
                    "code": code,
                    "message": message,
                    "timestamp": "2024-08-01T00:00:00Z",
                    "request_id": "abc12345",
                }
            }
        }
    }


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Bad Request", "model": APIErrorResponse,
          "content": _example("BAD_REQUEST", "Invalid request parameters")},
    401: {"description": "Unauthorized", "model": APIErrorResponse,
          "content": _example("UNAUTHORIZED", "Authentication required")},
    403: {"description": "Forbidden", "model": APIErrorResponse,
          "content": _example("PERMISSION_DENIED", "Permission denied: requester is not an active admin")},
    404: {"description": "Not Found", "model": APIErrorResponse,
          "content": _example("NOT_FOUND", "Property not found")},
    409: {"description": "Conflict", "model": APIErrorResponse,
          "content": _example("CONFLICT", "Resource already exists")},
    422: {"description": "Validation Error", "model": APIErrorResponse,
          "content": _example("VALIDATION_ERROR", "Request validation failed")},
}


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Pick documented error responses for a route decorator."""
    return {code: COMMON_ERROR_RESPONSES[code] for code in status_codes}
