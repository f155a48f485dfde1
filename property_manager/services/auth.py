"""
Authentication service for signup, signin and the password reset flow.
Handles credential checks, token issuance and business rule validation.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from property_manager.config import settings
from property_manager.repositories.user import UserRepository
from property_manager.models.user import User
from property_manager.services.notification import NotificationService, build_reset_link
from property_manager.utils.auth import (
    ACCESS_TOKEN,
    RESET_TOKEN,
    create_access_token,
    create_reset_token,
    password_fingerprint,
    verify_token
)
from property_manager.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordMismatchError,
    UserAlreadyExistsError,
    UserNotFoundError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Account service covering registration, login and password reset.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        notification_service: Optional[NotificationService] = None
    ):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.notifications = notification_service or NotificationService()

    async def signup(
        self,
        full_name: str,
        email: str,
        password: str,
        confirm_password: str,
        receive_emails: bool = False
    ) -> User:
        """
        Register a new user.

        Raises:
            UserAlreadyExistsError: If the email is already registered
            PasswordMismatchError: If password and confirmation differ
        """
        existing_user = await self.user_repo.get_by_email(email)
        if existing_user:
            logger.info(f"Signup rejected, user already exists: {email}")
            raise UserAlreadyExistsError()

        if password != confirm_password:
            raise PasswordMismatchError()

        try:
            user = await self.user_repo.create_user(
                full_name=full_name,
                email=email,
                password=password,
                receive_emails=receive_emails
            )
        except IntegrityError:
            # Concurrent signup won the unique index
            logger.info(f"Signup lost uniqueness race for: {email}")
            raise UserAlreadyExistsError()

        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        user = await self.user_repo.get_by_email(email)

        if not user or not user.verify_password(password):
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def signin(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and create an access token.

        Returns:
            Tuple of (user, access_token)
        """
        user = await self.authenticate_user(email, password)
        return user, create_access_token(user.id)

    async def forgot_password(self, email: str) -> None:
        """
        Email a password reset link carrying a time-limited reset token.

        Raises:
            UserNotFoundError: If no account uses the email; no mail is sent
            MailDeliveryError: If the mail provider fails
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            raise UserNotFoundError()

        reset_token = create_reset_token(user.id, user.hashed_password)
        reset_link = build_reset_link(settings.password_reset_url, reset_token)

        await self.notifications.send_reset_email(user.email, reset_link)
        logger.info(f"Password reset link sent to {user.email}")

    async def reset_password(self, token: str, password: str, confirm_password: str) -> User:
        """
        Set a new password using a reset token.

        Raises:
            InvalidTokenError / TokenExpiredError: If the token is not a valid reset token,
                or was already used (the password changed since it was issued)
            PasswordMismatchError: If password and confirmation differ
            UserNotFoundError: If the account no longer exists
        """
        payload = verify_token(token, token_type=RESET_TOKEN)

        if password != confirm_password:
            raise PasswordMismatchError()

        user = await self._get_user_for_token(payload.user_id)
        if not user:
            raise UserNotFoundError()

        if payload.password_fingerprint != password_fingerprint(user.hashed_password):
            raise InvalidTokenError("Reset token is no longer valid")

        return await self.user_repo.update_password(user, password)

    async def get_current_user(self, token: str) -> User:
        """
        Get the user an access token was issued to.

        Raises:
            InvalidTokenError: If the token is invalid or its user is gone
            TokenExpiredError: If the token is expired
        """
        payload = verify_token(token, token_type=ACCESS_TOKEN)

        user = await self._get_user_for_token(payload.user_id)
        if not user:
            raise InvalidTokenError("Token user no longer exists")

        return user

    async def _get_user_for_token(self, user_id: str) -> Optional[User]:
        """Load the user named by a token's subject claim."""
        try:
            user_uuid = uuid.UUID(user_id)
        except ValueError:
            raise InvalidTokenError("Invalid token payload")
        return await self.user_repo.get_by_id(user_uuid)
