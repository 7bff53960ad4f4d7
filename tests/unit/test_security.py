"""Tests for access tokens and password hashing.

Test Organization:
- TestTokenService: Issue/decode round trip, expiry, tampering
- TestPasswordHasher: bcrypt hashing and verification
"""

from datetime import timedelta

import pytest
from authlib.jose import JsonWebToken
from authlib.jose.errors import BadSignatureError, ExpiredTokenError, JoseError
from uuid_extension import uuid7

from storefront.domain.models.user import Role
from storefront.infrastructure.config import Settings
from storefront.infrastructure.security.passwords import PasswordHasher
from storefront.infrastructure.security.tokens import TokenService


@pytest.fixture
def token_service(test_settings: Settings) -> TokenService:
    return TokenService(test_settings)


class TestTokenService:
    """Test bearer token issuing and verification."""

    def test_round_trip(self, token_service: TokenService) -> None:
        """Test a freshly issued token decodes to the same subject and role.

        Arrange: User id and role
        Act: Issue then decode
        Assert: Claims match, token type is access
        """
        # Arrange
        user_id = uuid7()

        # Act
        claims = token_service.decode(token_service.issue(user_id, Role.SELLER))

        # Assert
        assert claims.sub == user_id
        assert claims.role == Role.SELLER
        assert claims.type == "access"
        assert claims.exp > claims.iat

    def test_expired_token_is_rejected(self, token_service: TokenService) -> None:
        """Test a token past its expiry raises ExpiredTokenError."""
        token = token_service.issue(uuid7(), Role.CUSTOMER, expires_delta=timedelta(seconds=-5))

        with pytest.raises(ExpiredTokenError):
            token_service.decode(token)

    def test_token_signed_with_other_key_is_rejected(
        self, token_service: TokenService, test_settings: Settings
    ) -> None:
        """Test a token signed with a different secret fails verification."""
        forger = TokenService(
            test_settings.model_copy(update={"secret_key": "another-secret-key-0123456789abcdef"})
        )
        token = forger.issue(uuid7(), Role.SELLER)

        with pytest.raises(BadSignatureError):
            token_service.decode(token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_rejected(self, token_service: TokenService, token: str) -> None:
        """Test malformed tokens raise a JoseError."""
        with pytest.raises(JoseError):
            token_service.decode(token)

    def test_missing_subject_is_rejected(
        self, token_service: TokenService, test_settings: Settings
    ) -> None:
        """Test a correctly signed token without ``sub`` is rejected."""
        jwt = JsonWebToken(["HS256"])
        token = jwt.encode(
            {"alg": "HS256"}, {"exp": 4_102_444_800, "role": "seller"}, test_settings.secret_key
        ).decode("utf-8")

        with pytest.raises(JoseError):
            token_service.decode(token)

    def test_es256_uses_ephemeral_key_outside_production(self, test_settings: Settings) -> None:
        """Test ES256 works without configured keys in non-production environments."""
        service = TokenService(
            test_settings.model_copy(update={"jwt_algorithm": "ES256", "secret_key": None})
        )
        user_id = uuid7()

        assert service.decode(service.issue(user_id, Role.CUSTOMER)).sub == user_id


class TestPasswordHasher:
    """Test bcrypt hashing."""

    @pytest.fixture
    def hasher(self) -> PasswordHasher:
        return PasswordHasher(rounds=4)

    async def test_hash_and_verify(self, hasher: PasswordHasher) -> None:
        """Test a hash verifies only the original password.

        Arrange: Plain password
        Act: Hash it, verify right and wrong passwords
        Assert: Hash differs from plain text; only the right password verifies
        """
        # Act
        password_hash = await hasher.hash("secret123")

        # Assert
        assert password_hash != "secret123"
        assert password_hash.startswith("$2")
        assert await hasher.verify("secret123", password_hash) is True
        assert await hasher.verify("secret124", password_hash) is False

    def test_hashes_are_salted(self, hasher: PasswordHasher) -> None:
        """Test hashing the same password twice gives different hashes."""
        assert hasher.hash_sync("secret123") != hasher.hash_sync("secret123")

    def test_verify_against_non_bcrypt_value_is_false(self, hasher: PasswordHasher) -> None:
        """Test a corrupt stored hash is treated as a mismatch."""
        assert hasher.verify_sync("secret123", "plain-text") is False

    @pytest.mark.parametrize("rounds", [3, 17])
    def test_rejects_out_of_range_rounds(self, rounds: int) -> None:
        """Test cost factors outside bcrypt's supported range are refused."""
        with pytest.raises(ValueError, match="bcrypt rounds"):
            PasswordHasher(rounds=rounds)
