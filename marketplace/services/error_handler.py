"""
Error responses for the marketplace API.

Every failure leaves the API as
{"error": {"code", "message", "timestamp", "request_id", "details"?}}
and is logged once, at a level matching how surprising it is.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from marketplace.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

CONSTRAINT_MESSAGES = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)


class ErrorHandlerService:
    """Turns exceptions into the error envelope."""

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if details:
            error["details"] = details
        if request_id:
            error["request_id"] = request_id
        return {"error": error}

    @staticmethod
    def handle_api_exception(exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        """Domain errors. Field errors of a ValidationError become details."""
        request_id = ErrorHandlerService._get_request_id(request)
        logger.warning(
            f"[{request_id}] {exception.error_code} ({exception.status_code}) on "
            f"{ErrorHandlerService._path(request)}: {exception.detail}"
        )

        details = exception.field_errors if isinstance(exception, ValidationError) else None
        return ErrorHandlerService._respond(
            exception.status_code,
            exception.error_code or "API_ERROR",
            exception.detail,
            request_id,
            details=details,
            headers=exception.headers,
        )

    @staticmethod
    def handle_validation_error(exception: PydanticValidationError, request: Optional[Request] = None) -> JSONResponse:
        """
        Request body, query and path validation failures.
        Works for pydantic's ValidationError and FastAPI's RequestValidationError.
        """
        request_id = ErrorHandlerService._get_request_id(request)
        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exception.errors()
        ]
        logger.warning(
            f"[{request_id}] {len(details)} validation errors on {ErrorHandlerService._path(request)}"
        )

        return ErrorHandlerService._respond(
            422, "VALIDATION_ERROR", "Request validation failed", request_id, details=details
        )

    @staticmethod
    def handle_database_error(exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """Integrity violations are conflicts; anything else is a 500 without driver text."""
        request_id = ErrorHandlerService._get_request_id(request)

        if isinstance(exception, IntegrityError):
            status_code, error_code = 409, "INTEGRITY_ERROR"
            constraint = ErrorHandlerService._extract_constraint_info(exception)
            message = f"Constraint violation: {constraint}" if constraint else "Data integrity constraint violation"
        else:
            status_code, error_code = 500, "DATABASE_ERROR"
            message = "Database operation failed"

        logger.error(
            f"[{request_id}] {error_code} on {ErrorHandlerService._path(request)}: "
            f"{type(exception).__name__}",
            exc_info=exception
        )
        return ErrorHandlerService._respond(status_code, error_code, message, request_id)

    @staticmethod
    def handle_http_exception(exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        """Framework errors such as unknown routes or wrong methods."""
        request_id = ErrorHandlerService._get_request_id(request)
        logger.info(
            f"[{request_id}] HTTP {exception.status_code} on {ErrorHandlerService._path(request)}"
        )

        return ErrorHandlerService._respond(
            exception.status_code,
            f"HTTP_{exception.status_code}",
            str(exception.detail),
            request_id,
            headers=getattr(exception, "headers", None),
        )

    @staticmethod
    def handle_unexpected_error(exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        request_id = ErrorHandlerService._get_request_id(request)
        logger.error(
            f"[{request_id}] Unhandled {type(exception).__name__} on {ErrorHandlerService._path(request)}",
            exc_info=exception
        )

        return ErrorHandlerService._respond(
            500,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
            request_id,
        )

    @staticmethod
    def _respond(
        status_code: int,
        error_code: str,
        message: str,
        request_id: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(error_code, message, details, request_id),
            headers=headers,
        )

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the request middleware, or make a short one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _path(request: Optional[Request]) -> str:
        return request.url.path if request is not None else "-"

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        error_msg = str(exception.orig).lower()
        for marker, message in CONSTRAINT_MESSAGES:
            if marker in error_msg:
                return message
        return None
