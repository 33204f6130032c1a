"""
Request middleware: request ids, request/response logging and body size limits.
"""

from typing import Callable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from marketplace.services.error_handler import ErrorHandlerService
from marketplace.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id, returned as X-Request-ID and reused in
    error responses, and rejects bodies larger than max_request_size.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 20 * 1024 * 1024,
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        size_error = self._check_request_size(request)
        if size_error is not None:
            response = ErrorHandlerService.handle_api_exception(size_error, request)
            response.headers["X-Request-ID"] = request_id
            return response

        if self.enable_request_logging:
            logger.info(
                f"Request [{request_id}]: {request.method} {request.url.path}",
                extra={"request_id": request_id, "method": request.method, "path": request.url.path}
            )

        response = await call_next(request)

        processing_time = time.time() - start_time
        if self.enable_request_logging:
            logger.info(
                f"Response [{request_id}]: {response.status_code} in {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time": processing_time
                }
            )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response

    def _check_request_size(self, request: Request) -> Optional[BadRequestError]:
        content_length = request.headers.get("content-length")
        if not content_length:
            return None

        try:
            size = int(content_length)
        except ValueError:
            return BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            logger.warning(f"Rejected request of {size} bytes to {request.url.path}")
            return BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )
        return None
