"""User domain model.

Stores marketplace accounts (customers and sellers). The password hash is a
deferred column: ordinary reads never load it, and touching it on an object
loaded without credentials raises instead of issuing a lazy query.
"""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from storefront.domain.models.base import BaseEntity, enum_values
from storefront.infrastructure.constants import UserLimits


class Role(StrEnum):
    """Account roles."""

    USER = "user"
    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"


class AccountStatus(StrEnum):
    """Account lifecycle states. Only active accounts may authenticate."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class User(BaseEntity):
    """User entity.

    Attributes:
        id: UUIDv7 primary key
        name: Display name
        email: Unique email address (normalized to lowercase)
        password_hash: bcrypt hash, deferred and never loaded by default
        role: Account role (customer or seller on self-registration)
        status: Account status
        email_verified: Whether the address has been confirmed
        last_login: Time of the last successful login
        created_at: Entity creation timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(UserLimits.MAX_NAME_LENGTH),
        nullable=False,
        comment="User display name",
    )
    email: Mapped[str] = mapped_column(
        String(UserLimits.MAX_EMAIL_LENGTH),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address (normalized to lowercase for consistency)",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        deferred=True,
        deferred_raiseload=True,
        comment="bcrypt password hash",
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", native_enum=False, values_callable=enum_values, length=20),
        default=Role.CUSTOMER,
        nullable=False,
    )
    status: Mapped[AccountStatus] = mapped_column(
        Enum(
            AccountStatus,
            name="account_status",
            native_enum=False,
            values_callable=enum_values,
            length=20,
        ),
        default=AccountStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Time of the last successful login",
    )

    @validates("email")
    def normalize_email(self, _key: str, value: str) -> str:
        """Normalize email address to lowercase for case-insensitive uniqueness."""
        return value.strip().lower() if value else value

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def validation_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        name = (self.name or "").strip()
        if len(name) < UserLimits.MIN_NAME_LENGTH:
            errors["name"] = (
                f"Name must be at least {UserLimits.MIN_NAME_LENGTH} characters long"
            )
        if not self.email or "@" not in self.email:
            errors["email"] = "Please provide a valid email"
        return errors

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
