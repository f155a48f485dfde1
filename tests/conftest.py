"""
Test configuration and fixtures for the property manager API.
Provides database fixtures, a mocked mail provider, test data factories and common test utilities.
"""

import os

# Configure the application before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-used-only-by-the-test-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import asyncio
import json
import uuid
from pathlib import Path
from typing import AsyncGenerator, Callable, List

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from property_manager.main import app
from property_manager.config import settings
from property_manager.database import Base, get_db
from property_manager.models.user import User
from property_manager.repositories.user import UserRepository
from property_manager.repositories.property import PropertyRepository
from property_manager.services.auth import AuthService
from property_manager.services.notification import NotificationService
from property_manager.services.property import PropertyService
from property_manager.utils.dependencies import get_notification_service, get_property_service
from property_manager.utils.file_utils import FileStorage

MAIL_API_URL = "https://mail.test/v3/send"
DEFAULT_PASSWORD = "testpassword123"


class MailOutbox:
    """Records requests sent to the mocked mail provider."""

    def __init__(self, status_code: int = 202):
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": self.status_code < 300})

    @property
    def sent(self) -> List[dict]:
        return [json.loads(request.content) for request in self.requests]


def make_engine(database_url: str) -> AsyncEngine:
    """Create a test engine; NullPool keeps connections off shared event loops."""
    return create_async_engine(database_url, poolclass=NullPool)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """File-backed SQLite database private to one test."""
    return f"sqlite+aiosqlite:///{(tmp_path / 'test.db').as_posix()}"


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Upload directory private to one test."""
    return tmp_path / "uploads"


@pytest.fixture
def mail_outbox() -> MailOutbox:
    """Mocked mail provider accepting every message."""
    return MailOutbox()


@pytest.fixture
def notification_service(mail_outbox: MailOutbox) -> NotificationService:
    """Notification service wired to the mocked mail provider."""
    config = settings.model_copy(update={
        "mail_api_url": MAIL_API_URL,
        "mail_api_key": "test-mail-key",
        "mail_from": "no-reply@propertymanager.test",
    })
    return NotificationService(config=config, transport=httpx.MockTransport(mail_outbox.handler))


# Async fixtures for repository and service tests
@pytest.fixture
async def db_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create the schema in a fresh database."""
    engine = make_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


@pytest.fixture
def auth_service(db_session: AsyncSession, notification_service: NotificationService) -> AuthService:
    """Create an auth service instance."""
    return AuthService(db_session, notification_service)


@pytest.fixture
def property_service(db_session: AsyncSession, upload_dir: Path) -> PropertyService:
    """Create a property service instance writing into the test upload dir."""
    return PropertyService(db_session, FileStorage(upload_dir))


@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    """Create a registered user."""
    return await UserFactory.create_user(user_repository, email="owner@test.com")


# Sync fixtures for API tests
@pytest.fixture
def session_factory(database_url: str) -> async_sessionmaker:
    """Session factory bound to a freshly created schema."""
    engine = make_engine(database_url)

    async def create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory: async_sessionmaker) -> Callable:
    """Run an async callable taking a session, from synchronous tests."""
    def runner(fn):
        async def wrapper():
            async with session_factory() as session:
                return await fn(session)
        return asyncio.run(wrapper())
    return runner


@pytest.fixture
def client(
    session_factory: async_sessionmaker,
    notification_service: NotificationService,
    upload_dir: Path
) -> TestClient:
    """Create a test client with database, mail and upload overrides."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_property_service(db: AsyncSession = Depends(get_db)):
        return PropertyService(db, FileStorage(upload_dir))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    app.dependency_overrides[get_property_service] = override_get_property_service

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def signup_payload(
        email: str = None,
        password: str = DEFAULT_PASSWORD,
        confirm_password: str = None,
        full_name: str = "Test User",
        receive_emails: bool = True
    ) -> dict:
        """Create a signup request body."""
        return {
            "fullName": full_name,
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "confirmPassword": password if confirm_password is None else confirm_password,
            "receiveEmails": receive_emails
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = None,
        password: str = DEFAULT_PASSWORD,
        full_name: str = "Test User",
        receive_emails: bool = False
    ) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(
            full_name=full_name,
            email=email or f"test{uuid.uuid4().hex[:8]}@example.com",
            password=password,
            receive_emails=receive_emails
        )


class PropertyFactory:
    """Factory for property setup form data."""

    @staticmethod
    def form_data(inventory: str = None, **overrides) -> dict:
        """Create the text fields of a property setup form."""
        data = {
            "propertyType": "Hostel",
            "propertyName": "Sunrise Stay",
            "phoneNumber": "+91 98765 43210",
            "email": "front-desk@sunrise.test",
            "address": "12 Lake Road",
            "state": "Goa",
            "city": "Panaji",
            "pinCode": "403001",
        }
        if inventory is not None:
            data["inventory"] = inventory
        data.update(overrides)
        return data

    @staticmethod
    def logo(filename: str = "logo.png", content: bytes = b"\x89PNG fake logo bytes") -> dict:
        """Create the multipart logo part."""
        return {"logo": (filename, content, "image/png")}


def signup_and_signin(client: TestClient, email: str = "owner@test.com") -> str:
    """Register a user through the API and return a bearer access token."""
    client.post("/signup", json=UserFactory.signup_payload(email=email))
    response = client.post("/signin", json={"email": email, "password": DEFAULT_PASSWORD})
    return response.json()["token"]


def auth_headers(token: str) -> dict:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}
