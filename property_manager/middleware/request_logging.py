"""
Request logging middleware.
Tags each request with an id, rejects oversize bodies and logs request/response timing.
"""

from typing import Callable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from property_manager.services.error_handler import ErrorHandlerService
from property_manager.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns ``request.state.request_id``, enforces the optional request size limit and
    logs each request when enabled.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: Optional[int] = None,
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object
        """
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
        except BadRequestError as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        if self.enable_request_logging:
            self._log_request(request, request_id)

        response = await call_next(request)

        processing_time = time.time() - start_time
        if self.enable_request_logging:
            self._log_response(request, response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.4f}"
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Validate request content length against the configured limit, if any.

        Raises:
            BadRequestError: If request size exceeds limit
        """
        if self.max_request_size is None:
            return

        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _log_request(self, request: Request, request_id: str) -> None:
        """Log incoming request."""
        client_host = request.client.host if request.client else "unknown"
        logger.info(
            f"Request [{request_id}]: {request.method} {request.url.path} from {client_host}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": client_host
            }
        )

    def _log_response(
        self,
        request: Request,
        response: Response,
        request_id: str,
        processing_time: float
    ) -> None:
        """Log outgoing response."""
        logger.info(
            f"Response [{request_id}]: {response.status_code} for {request.method} "
            f"{request.url.path} in {processing_time:.3f}s",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "processing_time": processing_time
            }
        )
