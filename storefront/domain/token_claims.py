"""Access token claims for bearer authentication.

Defines the structure of the JWT issued on register/login and verified by the
authentication guard on every protected request.
"""

from datetime import UTC, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from storefront.domain.models.user import Role


class AccessTokenClaims(BaseModel):
    """JWT claims carried by an access token.

    Attributes:
        sub: ID of the user the token was issued to
        role: Role of the user at issue time (informational, the guard re-reads the user)
        exp: Token expiration time
        iat: Token issue time
        type: Token type identifier (always "access")
    """

    sub: UUID = Field(..., description="ID of the user this token identifies")
    role: Role = Field(..., description="Role of the user when the token was issued")
    exp: datetime = Field(..., description="Token expiration time (Unix timestamp)")
    iat: datetime = Field(..., description="Token issued at time (Unix timestamp)")
    type: Literal["access"] = Field(default="access", description="Type of token")

    def to_jwt_payload(self) -> dict[str, str | int]:
        """Convert claims to a JWT payload with Unix timestamps."""
        return {
            "sub": str(self.sub),
            "role": self.role.value,
            "exp": int(self.exp.timestamp()),
            "iat": int(self.iat.timestamp()),
            "type": self.type,
        }

    @classmethod
    def from_jwt_payload(cls, payload: dict[str, int | str]) -> "AccessTokenClaims":
        """Create claims from a decoded JWT payload.

        Raises:
            pydantic.ValidationError: If a claim is missing or malformed
        """
        return cls(
            sub=payload.get("sub"),  # type: ignore[arg-type]
            role=payload.get("role"),  # type: ignore[arg-type]
            exp=datetime.fromtimestamp(float(payload.get("exp", 0)), UTC),
            iat=datetime.fromtimestamp(float(payload.get("iat", 0)), UTC),
            type=payload.get("type", "access"),  # type: ignore[arg-type]
        )
