"""
FastAPI dependency injection utilities for services and route protection.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from property_manager.database import get_db
from property_manager.models.user import User
from property_manager.services.auth import AuthService
from property_manager.services.notification import NotificationService
from property_manager.services.property import PropertyService
from property_manager.utils.exceptions import UnauthorizedError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_notification_service() -> NotificationService:
    """Get notification service instance."""
    return NotificationService()


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        notification_service: Outbound mail service

    Returns:
        AuthService instance
    """
    return AuthService(db, notification_service)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session

    Returns:
        PropertyService instance
    """
    return PropertyService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer access token.

    Used as a router-level dependency, so protected routes never run without it.

    Raises:
        UnauthorizedError: If no token is provided
        InvalidTokenError: If the token is invalid or not an access token
        TokenExpiredError: If the token is expired
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)
