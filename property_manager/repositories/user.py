"""
User repository for registration and authentication lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from property_manager.repositories.base import BaseRepository
from property_manager.models.user import User
from property_manager.utils.auth import hash_password
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Lowercase and trim an email address for storage and lookup."""
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        query = select(User).where(User.email == normalize_email(email))
        result = await self.db.execute(query)
        user = result.scalar_one_or_none()

        if user:
            logger.debug(f"Retrieved user by email: {email}")
        else:
            logger.debug(f"User with email {email} not found")

        return user

    async def create_user(
        self,
        full_name: str,
        email: str,
        password: str,
        receive_emails: bool = False
    ) -> User:
        """
        Create a new user with a hashed password.

        Raises:
            IntegrityError: If the email is already registered
        """
        created_user = await self.create({
            "full_name": full_name,
            "email": normalize_email(email),
            "hashed_password": hash_password(password),
            "receive_emails": receive_emails,
        })
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def update_password(self, user: User, new_password: str) -> User:
        """
        Replace a user's password with a freshly hashed one.

        Args:
            user: Loaded user instance
            new_password: New plain text password

        Returns:
            Updated user instance
        """
        user.set_password(new_password)
        updated_user = await self.save(user)
        logger.info(f"Password updated for user: {updated_user.email}")
        return updated_user
