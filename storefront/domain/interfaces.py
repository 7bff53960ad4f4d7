"""Repository interfaces defining data access contracts.

These interfaces are the contract between the use cases and the
infrastructure layer, so use cases can be tested against mocks.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from uuid import UUID

from storefront.domain.models.product import Product, SellerStats
from storefront.domain.models.user import User
from storefront.domain.pagination import Page, PageParams


if TYPE_CHECKING:
    from storefront.infrastructure.filtering.filterset import FilterSet
else:
    FilterSet = Any


class IRepository[T](ABC):
    """Base repository interface for entity CRUD operations.

    Type Parameters:
        T: Entity type managed by this repository
    """

    @abstractmethod
    async def get_by_id(self, id: UUID | str) -> T | None:
        """Retrieve an entity by identifier.

        Raises:
            MalformedIdentifierError: If ``id`` is not a valid identifier
        """

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new entity and return it with generated fields populated."""

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an existing entity."""

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Permanently remove an entity."""

    @abstractmethod
    async def find(
        self,
        filterset: "FilterSet",
        skip: int = 0,
        limit: int = 100,
        order_by: Sequence[Any] = (),
    ) -> list[T]:
        """Find entities matching a FilterSet."""

    @abstractmethod
    async def count(self, filterset: "FilterSet") -> int:
        """Count entities matching a FilterSet."""


class IUserRepository(IRepository[User]):
    """User-specific repository interface."""

    @abstractmethod
    async def get_by_email(self, email: str, *, include_credentials: bool = False) -> User | None:
        """Retrieve a user by email (case-insensitive).

        Args:
            email: Email address
            include_credentials: Load the password hash; only login should ask for it
        """


class IProductRepository(IRepository[Product]):
    """Product-specific repository interface."""

    @abstractmethod
    async def find_page(
        self, filterset: "FilterSet", params: PageParams, sort: str
    ) -> Page[Product]:
        """Return one page of products matching the filters, in sort order."""

    @abstractmethod
    async def stats_for_seller(self, seller_id: UUID) -> SellerStats:
        """Aggregate inventory figures across all of a seller's products."""
