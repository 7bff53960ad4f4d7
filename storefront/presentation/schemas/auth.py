"""Account API request and response schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from storefront.domain.models.user import AccountStatus, Role
from storefront.infrastructure.constants import SecurityLimits, UserLimits
from storefront.presentation.schemas.common import CamelModel, RequestModel


class RegisterRequest(RequestModel):
    """Request schema for creating an account."""

    name: str = Field(
        ...,
        min_length=UserLimits.MIN_NAME_LENGTH,
        max_length=UserLimits.MAX_NAME_LENGTH,
        description="Display name",
    )
    email: EmailStr = Field(..., description="Email address (stored lowercase)")
    password: str = Field(
        ...,
        min_length=SecurityLimits.MIN_PASSWORD_LENGTH,
        max_length=SecurityLimits.MAX_PASSWORD_LENGTH,
        description="Password",
    )
    role: Literal["seller", "customer"] = Field(
        default="customer", description="Account type chosen at sign-up"
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Seller",
                    "email": "jane@example.com",
                    "password": "s3cret-pass",
                    "role": "seller",
                }
            ]
        }
    }


class LoginRequest(RequestModel):
    """Request schema for signing in."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserSummary(CamelModel):
    """Public view of an account."""

    id: UUID
    name: str
    email: str
    role: Role
    status: AccountStatus


class UserResponse(UserSummary):
    """Account view returned after registration or login."""

    email_verified: bool
    last_login: datetime | None = None
    created_at: datetime


class AuthData(CamelModel):
    """Signed-in account plus its bearer token."""

    user: UserResponse
    token: str = Field(..., description="Bearer access token")
