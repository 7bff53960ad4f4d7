"""Account use cases: registration, login and request authentication."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from structlog import get_logger

from storefront.domain.exceptions import AuthenticationError
from storefront.domain.models.user import Role, User
from storefront.domain.principal import Principal
from storefront.infrastructure.persistence.unit_of_work import UnitOfWork
from storefront.infrastructure.security.passwords import PasswordHasher
from storefront.infrastructure.security.tokens import TokenService


logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INACTIVE_ACCOUNT = "Account is not active. Please contact support."


@dataclass(frozen=True, slots=True)
class AuthResult:
    """A user together with a freshly issued access token."""

    user: User
    token: str


class RegisterUserUseCase:
    """Use case for creating an account and signing it in."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._uow_factory = uow_factory
        self._password_hasher = password_hasher
        self._token_service = token_service

    async def execute(
        self, name: str, email: str, password: str, role: Role = Role.CUSTOMER
    ) -> AuthResult:
        """Execute the use case.

        Args:
            name: Display name
            email: Email address (stored lowercase)
            password: Plain-text password, hashed before storage
            role: Requested role (customer or seller)

        Returns:
            The created user and an access token

        Raises:
            IntegrityError: If the email is already registered (rendered as a conflict)
        """
        password_hash = await self._password_hasher.hash(password)

        # Duplicate emails are caught by the unique index, not a pre-check
        async with self._uow_factory() as uow:
            user = await uow.users.create(
                User(name=name, email=email, password_hash=password_hash, role=role)
            )

        logger.info("user_registered", user_id=str(user.id), role=user.role.value)
        return AuthResult(user=user, token=self._token_service.issue(user.id, user.role))


class LoginUseCase:
    """Use case for exchanging credentials for an access token."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._uow_factory = uow_factory
        self._password_hasher = password_hasher
        self._token_service = token_service

    async def execute(self, email: str, password: str) -> AuthResult:
        """Execute the use case.

        The password is checked before the account status, so a wrong
        password never reveals whether an account is suspended.

        Raises:
            AuthenticationError: If the credentials are wrong or the account is not active
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_email(email, include_credentials=True)
            if user is None or not await self._password_hasher.verify(
                password, user.password_hash
            ):
                logger.info("login_failed", reason="invalid_credentials")
                raise AuthenticationError(INVALID_CREDENTIALS)

            if not user.is_active:
                logger.info("login_failed", reason="inactive_account", user_id=str(user.id))
                raise AuthenticationError(INACTIVE_ACCOUNT)

            user.last_login = datetime.now(UTC)
            user = await uow.users.update(user)

        logger.info("user_logged_in", user_id=str(user.id))
        return AuthResult(user=user, token=self._token_service.issue(user.id, user.role))


class AuthenticateUseCase:
    """Resolves a bearer token to the principal making the request.

    Performs no writes: it neither refreshes the token nor touches last_login.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork], token_service: TokenService) -> None:
        self._uow_factory = uow_factory
        self._token_service = token_service

    async def execute(self, token: str | None) -> Principal:
        """Execute the use case.

        Args:
            token: Raw bearer token, or None when the header is absent

        Returns:
            The authenticated principal

        Raises:
            AuthenticationError: If the token is missing, or its user is gone or not active
            JoseError: If the token is malformed, badly signed or expired
        """
        if not token:
            raise AuthenticationError("Not authorized, no token")

        claims = self._token_service.decode(token)

        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(claims.sub)

        if user is None:
            raise AuthenticationError("Not authorized, user not found")
        if not user.is_active:
            raise AuthenticationError(INACTIVE_ACCOUNT)

        return Principal.model_validate(user)
