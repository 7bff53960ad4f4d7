"""Tests for account use cases with mocked repositories.

Test Organization:
- TestLogin: Credential check ordering and last_login stamping
- TestAuthenticate: Token presence, user lookup and account status
"""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from storefront.app.usecases.auth_usecases import (
    INACTIVE_ACCOUNT,
    INVALID_CREDENTIALS,
    AuthenticateUseCase,
    LoginUseCase,
)
from storefront.domain.exceptions import AuthenticationError
from storefront.domain.models.user import AccountStatus, Role
from storefront.infrastructure.config import Settings
from storefront.infrastructure.security.passwords import PasswordHasher
from storefront.infrastructure.security.tokens import TokenService
from tests.factories import user_factory


class FakeUnitOfWork:
    def __init__(self) -> None:
        self.users = AsyncMock()
        self.users.update.side_effect = lambda user: user

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service(test_settings: Settings) -> TokenService:
    return TokenService(test_settings)


# =============================================================================
# Login
# =============================================================================


class TestLogin:
    """Test LoginUseCase."""

    async def test_unknown_email(
        self, uow: FakeUnitOfWork, hasher: PasswordHasher, token_service: TokenService
    ) -> None:
        uow.users.get_by_email.return_value = None

        with pytest.raises(AuthenticationError, match=INVALID_CREDENTIALS):
            await LoginUseCase(lambda: uow, hasher, token_service).execute("x@y.io", "pw")

    async def test_wrong_password_on_suspended_account_hides_status(
        self, uow: FakeUnitOfWork, hasher: PasswordHasher, token_service: TokenService
    ) -> None:
        """Test a wrong password is reported before the account status.

        Arrange: Suspended user with a known password
        Act: Log in with a different password
        Assert: Generic invalid-credentials error
        """
        # Arrange
        uow.users.get_by_email.return_value = user_factory(
            status=AccountStatus.SUSPENDED, password_hash=hasher.hash_sync("right-one")
        )

        # Act / Assert
        with pytest.raises(AuthenticationError, match=INVALID_CREDENTIALS):
            await LoginUseCase(lambda: uow, hasher, token_service).execute("x@y.io", "wrong")

    async def test_correct_password_on_suspended_account(
        self, uow: FakeUnitOfWork, hasher: PasswordHasher, token_service: TokenService
    ) -> None:
        uow.users.get_by_email.return_value = user_factory(
            status=AccountStatus.SUSPENDED, password_hash=hasher.hash_sync("right-one")
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await LoginUseCase(lambda: uow, hasher, token_service).execute("x@y.io", "right-one")
        assert exc_info.value.message == INACTIVE_ACCOUNT
        uow.users.update.assert_not_awaited()

    async def test_success_stamps_last_login(
        self, uow: FakeUnitOfWork, hasher: PasswordHasher, token_service: TokenService
    ) -> None:
        user = user_factory(role=Role.SELLER, password_hash=hasher.hash_sync("secret123"))
        uow.users.get_by_email.return_value = user

        result = await LoginUseCase(lambda: uow, hasher, token_service).execute(
            user.email, "secret123"
        )

        assert result.user.last_login is not None
        assert token_service.decode(result.token).sub == user.id


# =============================================================================
# Authenticate
# =============================================================================


class TestAuthenticate:
    """Test AuthenticateUseCase."""

    async def test_missing_token(self, uow: FakeUnitOfWork, token_service: TokenService) -> None:
        with pytest.raises(AuthenticationError, match="Not authorized, no token"):
            await AuthenticateUseCase(lambda: uow, token_service).execute(None)
        uow.users.get_by_id.assert_not_awaited()

    async def test_deleted_user(self, uow: FakeUnitOfWork, token_service: TokenService) -> None:
        user = user_factory()
        uow.users.get_by_id.return_value = None

        with pytest.raises(AuthenticationError, match="user not found"):
            await AuthenticateUseCase(lambda: uow, token_service).execute(
                token_service.issue(user.id, user.role)
            )

    async def test_suspended_user(self, uow: FakeUnitOfWork, token_service: TokenService) -> None:
        user = user_factory(status=AccountStatus.SUSPENDED)
        uow.users.get_by_id.return_value = user

        with pytest.raises(AuthenticationError) as exc_info:
            await AuthenticateUseCase(lambda: uow, token_service).execute(
                token_service.issue(user.id, user.role)
            )
        assert exc_info.value.message == INACTIVE_ACCOUNT

    async def test_active_user_resolves_to_principal(
        self, uow: FakeUnitOfWork, token_service: TokenService
    ) -> None:
        user = user_factory(role=Role.SELLER)
        uow.users.get_by_id.return_value = user

        principal = await AuthenticateUseCase(lambda: uow, token_service).execute(
            token_service.issue(user.id, user.role)
        )

        assert principal.id == user.id
        assert principal.is_seller
        uow.users.update.assert_not_awaited()
