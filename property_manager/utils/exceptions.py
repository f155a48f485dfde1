"""
Custom exception classes for the Property Manager API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class InternalServerError(APIException):
    """Internal server error exception."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="INTERNAL_SERVER_ERROR"
        )


# Authentication specific exceptions
class InvalidCredentialsError(UnauthorizedError):
    """Invalid login credentials exception."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class TokenExpiredError(UnauthorizedError):
    """JWT token expired exception."""

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):
    """Invalid JWT token exception."""

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


# Account specific exceptions
class UserAlreadyExistsError(ConflictError):
    """Signup with an email that is already registered."""

    def __init__(self, detail: str = "User Already Exists, go Signin Chief!"):
        super().__init__(detail)


class UserNotFoundError(NotFoundError):
    """No account for the given email or id."""

    def __init__(self):
        super().__init__("User")


class PasswordMismatchError(BadRequestError):
    """Password and confirmation differ."""

    def __init__(self, detail: str = "Passwords do not match"):
        super().__init__(detail)


# Upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(detail)


# Outbound mail exceptions
class MailDeliveryError(InternalServerError):
    """
    Mail provider rejected or failed the send.
    The cause is logged; clients only see the generic message.
    """

    def __init__(self, reason: str):
        super().__init__()
        self.reason = reason
