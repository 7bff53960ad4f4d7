"""Global test configuration and fixtures.

Fixture Scoping Strategy:
- function: everything. Each test gets its own SQLite file, container and
  app, so no state leaks between tests.

Integration tests drive the real HTTP stack through ``httpx.ASGITransport``;
only image hosting is replaced by an in-memory fake.
"""

from collections.abc import AsyncGenerator, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from dependency_injector import providers
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.models.user import AccountStatus, User
from storefront.external.interfaces import IImageStorage
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.database import Database
from storefront.presentation.api import create_app
from tests.factories import product_payload


TEST_SECRET = "test-secret-key-with-enough-entropy-0123456789"
HOSTED_PREFIX = "https://res.cloudinary.com/test/image/upload/"


class FakeImageStorage(IImageStorage):
    """In-memory image host that returns predictable URLs.

    Set ``error`` to make every upload fail with that exception.
    """

    def __init__(self) -> None:
        self.uploaded: list[str] = []
        self.error: Exception | None = None

    async def upload_many(self, images: Sequence[str]) -> list[str]:
        if self.error is not None:
            raise self.error
        urls = []
        for image in images:
            if image.startswith(HOSTED_PREFIX):
                urls.append(image)
                continue
            self.uploaded.append(image)
            urls.append(f"{HOSTED_PREFIX}{len(self.uploaded)}.png")
        return urls


# ============================================================================
# Settings and Application
# ============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings for an isolated, file-backed SQLite database.

    Returns:
        Settings instance configured for testing
    """
    return Settings(
        app_env="testing",
        app_name="storefront-api-test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        database_auto_create=False,
        jwt_algorithm="HS256",
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        rate_limit_enabled=False,
        otel_enabled=False,
        cloudinary_cloud_name="test",
        cloudinary_api_key="test-key",
        cloudinary_api_secret="test-secret",
    )


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


async def build_app(settings: Settings, image_storage: IImageStorage) -> FastAPI:
    """Create an app with its schema in place and image hosting faked."""
    app = create_app(settings)
    container = app.state.container
    container.image_storage.override(providers.Object(image_storage))
    await container.database().create_all()
    return app


async def dispose_app(app: FastAPI) -> None:
    container = app.state.container
    await container.database().close()
    container.unwire()


@pytest.fixture
async def app(
    test_settings: Settings, image_storage: FakeImageStorage
) -> AsyncGenerator[FastAPI]:
    """FastAPI application backed by a fresh SQLite database (function-scoped)."""
    application = await build_app(test_settings, image_storage)
    yield application
    await dispose_app(application)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the app; unhandled errors propagate to the test."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def safe_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client that receives the 500 response instead of the raised exception."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def database(app: FastAPI) -> Database:
    return app.state.container.database()


# ============================================================================
# API Helpers
# ============================================================================


class ApiHelper:
    """Shortcuts for the requests most integration tests need as setup."""

    def __init__(self, client: AsyncClient, database: Database) -> None:
        self.client = client
        self.database = database
        self._counter = 0

    async def register(
        self,
        role: str = "customer",
        email: str | None = None,
        password: str = "secret123",
        name: str = "Test User",
    ) -> dict[str, Any]:
        """Register an account and return the response ``data`` (user and token)."""
        self._counter += 1
        response = await self.client.post(
            "/api/v1/auth/register",
            json={
                "name": name,
                "email": email or f"{role}{self._counter}@example.com",
                "password": password,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    @staticmethod
    def headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def seller_headers(self) -> dict[str, str]:
        return self.headers((await self.register(role="seller"))["token"])

    async def create_product(self, headers: dict[str, str], **overrides: Any) -> dict[str, Any]:
        """Create a product and return the response ``data``."""
        response = await self.client.post(
            "/api/v1/products", json=product_payload(**overrides), headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    async def set_account_status(self, user_id: str, status: AccountStatus) -> None:
        """Change an account's status directly in the database."""
        async with self.database.session() as session:
            await session.execute(
                update(User).where(User.id == UUID(user_id)).values(status=status)
            )


@pytest.fixture
def api(async_client: AsyncClient, database: Database) -> ApiHelper:
    return ApiHelper(async_client, database)


# ============================================================================
# Unit Test Doubles
# ============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mocked SQLAlchemy AsyncSession for repository and UoW unit tests."""
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()  # add() is synchronous in SQLAlchemy
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_session_factory(mock_db_session: AsyncMock) -> MagicMock:
    """Factory that returns the mock session directly, as async_sessionmaker would."""
    return MagicMock(return_value=mock_db_session)
