"""Access token issuing and verification using authlib JWT.

ES256 (asymmetric) is the default; HS256 is available through ``SECRET_KEY``.
Key material comes from ``Settings.get_jwt_private_key``/``get_jwt_public_key``.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from authlib.jose import JsonWebToken
from authlib.jose.errors import DecodeError, JoseError
from structlog import get_logger

from storefront.domain.models.user import Role
from storefront.domain.token_claims import AccessTokenClaims
from storefront.infrastructure.config import Settings


logger = get_logger(__name__)

_CLAIMS_OPTIONS = {
    "sub": {"essential": True},
    "exp": {"essential": True},
}


class TokenService:
    """Issues and verifies bearer access tokens.

    Args:
        settings: Application settings providing algorithm, keys and lifetime
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._algorithm = settings.jwt_algorithm
        self._jwt = JsonWebToken([self._algorithm])
        self._signing_key: str | None = None
        self._verification_key: str | None = None

    @property
    def signing_key(self) -> str:
        if self._signing_key is None:
            self._signing_key = self._settings.get_jwt_private_key()
        return self._signing_key

    @property
    def verification_key(self) -> str:
        if self._verification_key is None:
            self._verification_key = self._settings.get_jwt_public_key()
        return self._verification_key

    def issue(self, user_id: UUID, role: Role, expires_delta: timedelta | None = None) -> str:
        """Create a signed access token for a user.

        Args:
            user_id: Subject of the token
            role: Role recorded in the token
            expires_delta: Lifetime override (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

        Returns:
            Encoded JWT
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self._settings.access_token_expire_minutes)

        now = datetime.now(UTC)
        claims = AccessTokenClaims(sub=user_id, role=role, exp=now + expires_delta, iat=now)

        token = self._jwt.encode({"alg": self._algorithm}, claims.to_jwt_payload(), self.signing_key)

        logger.debug(
            "access_token_issued",
            user_id=str(user_id),
            algorithm=self._algorithm,
            expires_in_minutes=expires_delta.total_seconds() / 60,
        )
        return token.decode("utf-8") if isinstance(token, bytes) else token

    def decode(self, token: str) -> AccessTokenClaims:
        """Verify a token's signature and expiry and return its claims.

        Raises:
            ExpiredTokenError: If the token has expired
            JoseError: If the token is malformed, badly signed or missing claims
        """
        try:
            decoded = self._jwt.decode(token, self.verification_key, claims_options=_CLAIMS_OPTIONS)
            decoded.validate()
            return AccessTokenClaims.from_jwt_payload(dict(decoded))
        except JoseError:
            raise
        except (ValueError, TypeError) as exc:
            raise DecodeError("Invalid token") from exc
