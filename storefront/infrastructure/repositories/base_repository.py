"""Base repository implementation for common entity operations."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.interfaces import IRepository
from storefront.domain.models.base import BaseEntity
from storefront.infrastructure.persistence.errors import MalformedIdentifierError


if TYPE_CHECKING:
    from storefront.infrastructure.filtering.filterset import FilterSet
else:
    FilterSet = Any


def parse_identifier(value: UUID | str) -> UUID:
    """Coerce a path or query value into a record identifier.

    Raises:
        MalformedIdentifierError: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as e:
        raise MalformedIdentifierError(value) from e


class BaseRepository[T: BaseEntity](IRepository[T]):
    """Generic repository providing CRUD operations.

    Type Parameters:
        T: Entity type extending BaseEntity

    Attributes:
        _session: SQLAlchemy async session for database operations
        _model: Entity model class for type-safe queries
    """

    def __init__(self, session: AsyncSession, model: type[T]) -> None:
        self._session = session
        self._model = model

    async def get_by_id(self, id: UUID | str) -> T | None:
        """Retrieve entity by unique identifier.

        Args:
            id: UUID, or its string form straight from a request path

        Returns:
            Entity instance if found, None otherwise

        Raises:
            MalformedIdentifierError: If ``id`` cannot be parsed
        """
        result = await self._session.execute(
            select(self._model).where(self._model.id == parse_identifier(id))
        )
        return result.scalar_one_or_none()

    async def create(self, entity: T) -> T:
        """Insert a new entity and reload server-generated state."""
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Flush pending changes on an entity and reload it."""
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        """Permanently delete an entity (hard delete)."""
        await self._session.delete(entity)
        await self._session.flush()

    async def find(
        self,
        filterset: "FilterSet",
        skip: int = 0,
        limit: int = 100,
        order_by: Sequence[Any] = (),
    ) -> list[T]:
        """Find entities matching a FilterSet.

        Args:
            filterset: FilterSet instance with filter criteria
            skip: Number of records to skip (offset for pagination)
            limit: Maximum number of records to return
            order_by: ORDER BY clauses; primary key is always appended as a tiebreaker

        Returns:
            List of entities matching the filters
        """
        query = filterset.apply(select(self._model))
        query = query.order_by(*order_by, self._model.id).offset(skip).limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def count(self, filterset: "FilterSet") -> int:
        """Count entities matching a FilterSet."""
        count_query = filterset.apply(select(func.count()).select_from(self._model))
        result = await self._session.execute(count_query)
        return result.scalar_one()
