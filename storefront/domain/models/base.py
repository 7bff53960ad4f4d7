"""Base entity classes for domain models.

Provides the declarative base plus the columns every stored record shares:
a time-ordered UUIDv7 primary key and creation/modification timestamps.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extension import uuid7


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Store enum members by value rather than by name."""
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy ORM models."""


class BaseEntity(Base):
    """Base entity with time-ordered UUIDs and timestamps.

    Subclasses may implement ``validation_errors()`` returning a mapping of
    field name to message; the persistence layer checks it before every
    insert and update.

    Note:
        This is an abstract class. Inherit from it to create concrete entity models.
    """

    __abstract__ = True

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid7,
        comment="Primary key using UUIDv7 for time-ordered identifiers",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        comment="Timestamp of entity creation",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
        comment="Timestamp of last modification",
    )

    def validation_errors(self) -> dict[str, str]:
        """Return record-level rule violations keyed by field name."""
        return {}

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
