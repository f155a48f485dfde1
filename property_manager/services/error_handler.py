"""
Error handling service for consistent error response formatting and logging.
Every error body carries a one-line ``error`` message; internal causes are only logged.
"""

from typing import Dict, Any, Optional, List
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from property_manager.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    """

    @staticmethod
    def format_error_response(
        message: str,
        details: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Format error response body.

        Args:
            message: Human-readable error message
            details: Optional list of detailed error information

        Returns:
            Formatted error response dictionary
        """
        response: Dict[str, Any] = {"error": message}
        if details:
            response["details"] = details
        return response

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle custom API exceptions.

        Client errors are logged as warnings; server errors are logged with
        their cause and answered with the generic message.
        """
        request_id = ErrorHandlerService._get_request_id(request)
        path = request.url.path if request else None

        if exception.status_code >= 500:
            reason = getattr(exception, "reason", exception.detail)
            logger.error(
                f"API Exception [{request_id}]: {exception.error_code} - {reason}",
                extra={
                    "error_code": exception.error_code,
                    "status_code": exception.status_code,
                    "request_id": request_id,
                    "path": path
                }
            )
            message = GENERIC_ERROR_MESSAGE
        else:
            logger.warning(
                f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
                extra={
                    "error_code": exception.error_code,
                    "status_code": exception.status_code,
                    "request_id": request_id,
                    "path": path
                }
            )
            message = exception.detail

        return ErrorHandlerService._response(
            exception.status_code,
            ErrorHandlerService.format_error_response(message),
            request_id,
            exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: PydanticValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request validation errors with field information.
        """
        request_id = ErrorHandlerService._get_request_id(request)

        validation_details = []
        for error in exception.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            validation_details.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"]
            })

        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors",
            extra={
                "error_count": len(validation_details),
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        return ErrorHandlerService._response(
            422,
            ErrorHandlerService.format_error_response(
                "Request validation failed",
                details=validation_details
            ),
            request_id
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle database errors without exposing driver details.
        """
        request_id = ErrorHandlerService._get_request_id(request)

        if isinstance(exception, IntegrityError):
            status_code = 409
            message = "Data integrity constraint violation"
        else:
            status_code = 500
            message = GENERIC_ERROR_MESSAGE

        logger.error(
            f"Database Error [{request_id}]: {type(exception).__name__} - {exception}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None
            },
            exc_info=exception
        )

        return ErrorHandlerService._response(
            status_code,
            ErrorHandlerService.format_error_response(message),
            request_id
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle framework HTTP exceptions (404 routes, 405 methods, ...).
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        return ErrorHandlerService._response(
            exception.status_code,
            ErrorHandlerService.format_error_response(str(exception.detail)),
            request_id,
            getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle unexpected errors with a generic 500 response.
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {exception}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=exception
        )

        return ErrorHandlerService._response(
            500,
            ErrorHandlerService.format_error_response(GENERIC_ERROR_MESSAGE),
            request_id
        )

    @staticmethod
    def _response(
        status_code: int,
        content: Dict[str, Any],
        request_id: str,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        """Build the JSON response and tag it with the request id."""
        response_headers = dict(headers or {})
        response_headers["X-Request-ID"] = request_id
        return JSONResponse(status_code=status_code, content=content, headers=response_headers)

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the request logging middleware, or make one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]
