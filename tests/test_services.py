"""
Tests for the account and property services.
"""

import io
import uuid
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import UploadFile

from property_manager.models.user import User
from property_manager.repositories.property import PropertyRepository
from property_manager.repositories.user import UserRepository
from property_manager.schemas.property import PropertySetupData, parse_inventory
from property_manager.services.auth import AuthService
from property_manager.services.property import PropertyService
from property_manager.utils.auth import RESET_TOKEN, create_access_token, create_reset_token, verify_token
from property_manager.utils.exceptions import (
    BadRequestError,
    FileUploadError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordMismatchError,
    UserAlreadyExistsError,
    UserNotFoundError
)
from tests.conftest import DEFAULT_PASSWORD, MailOutbox


class TestAuthService:
    """Test AuthService business logic."""

    @pytest.mark.asyncio
    async def test_signup_creates_user(self, auth_service: AuthService, user_repository: UserRepository):
        user = await auth_service.signup(
            full_name="New Owner",
            email="new@example.com",
            password=DEFAULT_PASSWORD,
            confirm_password=DEFAULT_PASSWORD,
            receive_emails=True
        )

        stored = await user_repository.get_by_email("new@example.com")
        assert stored is not None
        assert stored.id == user.id
        assert stored.receive_emails is True

    @pytest.mark.asyncio
    async def test_signup_existing_email(self, auth_service: AuthService, test_user: User):
        """A registered email is rejected before the passwords are compared."""
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await auth_service.signup(
                full_name="Again",
                email=test_user.email,
                password="one",
                confirm_password="two"
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "User Already Exists, go Signin Chief!"

    @pytest.mark.asyncio
    async def test_signup_race_hits_unique_index(
        self,
        auth_service: AuthService,
        user_repository: UserRepository,
        test_user: User,
        monkeypatch
    ):
        """A signup that passes the existence check still gets 409 from the unique index."""
        async def not_found(email):
            return None

        monkeypatch.setattr(auth_service.user_repo, "get_by_email", not_found)

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await auth_service.signup(
                full_name="Racer",
                email=test_user.email,
                password=DEFAULT_PASSWORD,
                confirm_password=DEFAULT_PASSWORD
            )

        assert exc_info.value.status_code == 409
        assert await user_repository.count({"email": test_user.email}) == 1

    @pytest.mark.asyncio
    async def test_signup_password_mismatch(self, auth_service: AuthService, user_repository: UserRepository):
        with pytest.raises(PasswordMismatchError):
            await auth_service.signup(
                full_name="Typo",
                email="typo@example.com",
                password="password-one",
                confirm_password="password-two"
            )

        assert await user_repository.get_by_email("typo@example.com") is None

    @pytest.mark.asyncio
    async def test_signin_returns_token_for_user(self, auth_service: AuthService, test_user: User):
        user, token = await auth_service.signin(test_user.email, DEFAULT_PASSWORD)

        assert user.id == test_user.id
        assert verify_token(token).user_id == str(test_user.id)

    @pytest.mark.asyncio
    async def test_signin_failures_are_indistinguishable(self, auth_service: AuthService, test_user: User):
        """Unknown email and wrong password fail the same way."""
        with pytest.raises(InvalidCredentialsError) as unknown:
            await auth_service.signin("ghost@example.com", DEFAULT_PASSWORD)
        with pytest.raises(InvalidCredentialsError) as wrong:
            await auth_service.signin(test_user.email, "wrong-password")

        assert unknown.value.status_code == wrong.value.status_code == 401
        assert unknown.value.detail == wrong.value.detail == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_forgot_password_sends_reset_link(
        self,
        auth_service: AuthService,
        test_user: User,
        mail_outbox: MailOutbox
    ):
        """The mailed link carries a reset token for the user."""
        await auth_service.forgot_password(test_user.email)

        assert len(mail_outbox.sent) == 1
        message = mail_outbox.sent[0]
        assert message["personalizations"][0]["to"][0]["email"] == test_user.email

        body = message["content"][0]["value"]
        link = body.split(": ", 1)[1]
        token = parse_qs(urlparse(link).query)["token"][0]
        assert verify_token(token, token_type=RESET_TOKEN).user_id == str(test_user.id)

    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email(self, auth_service: AuthService, mail_outbox: MailOutbox):
        with pytest.raises(UserNotFoundError) as exc_info:
            await auth_service.forgot_password("ghost@example.com")

        assert exc_info.value.detail == "User not found"
        assert mail_outbox.requests == []

    @pytest.mark.asyncio
    async def test_reset_password(self, auth_service: AuthService, test_user: User):
        token = create_reset_token(test_user.id, test_user.hashed_password)

        await auth_service.reset_password(token, "new-password-1", "new-password-1")

        user, _ = await auth_service.signin(test_user.email, "new-password-1")
        assert user.id == test_user.id
        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate_user(test_user.email, DEFAULT_PASSWORD)

    @pytest.mark.asyncio
    async def test_reset_password_rejects_access_token(self, auth_service: AuthService, test_user: User):
        with pytest.raises(InvalidTokenError):
            await auth_service.reset_password(create_access_token(test_user.id), "x-pass", "x-pass")

    @pytest.mark.asyncio
    async def test_reset_password_mismatch(self, auth_service: AuthService, test_user: User):
        token = create_reset_token(test_user.id, test_user.hashed_password)

        with pytest.raises(PasswordMismatchError):
            await auth_service.reset_password(token, "one-pass", "two-pass")

    @pytest.mark.asyncio
    async def test_reset_token_is_single_use(self, auth_service: AuthService, test_user: User):
        """Once the password changes, the token that changed it stops working."""
        token = create_reset_token(test_user.id, test_user.hashed_password)
        await auth_service.reset_password(token, "new-password-1", "new-password-1")

        with pytest.raises(InvalidTokenError):
            await auth_service.reset_password(token, "new-password-2", "new-password-2")

        user, _ = await auth_service.signin(test_user.email, "new-password-1")
        assert user.id == test_user.id

    @pytest.mark.asyncio
    async def test_reset_token_without_password_binding(self, auth_service: AuthService, test_user: User):
        with pytest.raises(InvalidTokenError):
            await auth_service.reset_password(create_reset_token(test_user.id), "new-pass", "new-pass")

    @pytest.mark.asyncio
    async def test_get_current_user(self, auth_service: AuthService, test_user: User):
        user = await auth_service.get_current_user(create_access_token(test_user.id))
        assert user.id == test_user.id

    @pytest.mark.asyncio
    async def test_get_current_user_rejects_reset_token(self, auth_service: AuthService, test_user: User):
        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user(create_reset_token(test_user.id))

    @pytest.mark.asyncio
    async def test_get_current_user_for_deleted_account(self, auth_service: AuthService):
        with pytest.raises(InvalidTokenError):
            await auth_service.get_current_user(create_access_token(uuid.uuid4()))


def make_logo(filename: str = "logo.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(b"fake-image"), filename=filename)


class TestPropertyService:
    """Test PropertyService business logic."""

    @pytest.mark.asyncio
    async def test_setup_property(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        test_user: User,
        upload_dir: Path
    ):
        """The logo is stored and inventory entries are attributed to the caller."""
        data = PropertySetupData(
            property_type="Hotel",
            property_name="Harbor Inn",
            city="Kochi",
            inventory=parse_inventory(
                '[{"propertySpaceName": "Room 101", "capacity": 2},'
                ' {"propertySpaceName": "Room 102", "userId": "someone-else"}]'
            )
        )

        created = await property_service.setup_property(data, make_logo(), test_user)

        stored = await property_repository.get_by_id(created.id)
        assert stored.property_name == "Harbor Inn"
        assert stored.city == "Kochi"
        assert Path(stored.logo).parent == upload_dir
        assert Path(stored.logo).read_bytes() == b"fake-image"
        assert stored.inventory[0]["userId"] == str(test_user.id)
        assert stored.inventory[1]["userId"] == "someone-else"

    @pytest.mark.asyncio
    async def test_setup_property_requires_logo(
        self,
        property_service: PropertyService,
        property_repository: PropertyRepository,
        test_user: User
    ):
        with pytest.raises(FileUploadError) as exc_info:
            await property_service.setup_property(PropertySetupData(property_name="No Logo"), None, test_user)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Logo file is required"
        assert await property_repository.count() == 0

    @pytest.mark.asyncio
    async def test_setup_property_rejects_unnamed_logo(self, property_service: PropertyService, test_user: User):
        with pytest.raises(FileUploadError):
            await property_service.setup_property(PropertySetupData(), make_logo(""), test_user)


class TestParseInventory:
    """Test parsing of the inventory form field."""

    def test_empty_values(self):
        assert parse_inventory(None) == []
        assert parse_inventory("  ") == []
        assert parse_inventory("[]") == []

    def test_single_object_is_one_entry(self):
        items = parse_inventory('{"propertySpaceName": "Loft", "notes": "top floor"}')

        assert len(items) == 1
        assert items[0].property_space_name == "Loft"
        assert items[0].notes == "top floor"

    def test_each_entry_gets_a_timestamp(self):
        items = parse_inventory('[{"propertySpaceName": "A"}, {"propertySpaceName": "B"}]')

        assert all(item.created_at is not None for item in items)

    @pytest.mark.parametrize("raw", ["not json", "42", '"text"', "[1, 2]"])
    def test_malformed_inventory(self, raw):
        with pytest.raises(BadRequestError) as exc_info:
            parse_inventory(raw)

        assert exc_info.value.status_code == 400
