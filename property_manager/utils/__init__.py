"""
Utility modules for the Property Manager API.
"""

from .exceptions import (
    APIException,
    BadRequestError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    InternalServerError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
    PasswordMismatchError,
    FileUploadError,
    MailDeliveryError
)

from .auth import (
    create_token,
    create_access_token,
    create_reset_token,
    password_fingerprint,
    verify_token,
    hash_password,
    verify_password,
    TokenPayload
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_token",
    "create_access_token",
    "create_reset_token",
    "password_fingerprint",
    "verify_token",
    "hash_password",
    "verify_password",
    "TokenPayload",

    # Exceptions
    "APIException",
    "BadRequestError",
    "NotFoundError",
    "UnauthorizedError",
    "ConflictError",
    "InternalServerError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "PasswordMismatchError",
    "FileUploadError",
    "MailDeliveryError",
]
