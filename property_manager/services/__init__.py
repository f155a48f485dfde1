"""
Service layer for business logic implementation.
Contains services for accounts, property setup, notifications and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .notification import NotificationService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "NotificationService",
    "ErrorHandlerService"
]
