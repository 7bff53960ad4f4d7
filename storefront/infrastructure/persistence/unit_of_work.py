"""Unit of Work pattern for transaction management.

Every use case runs inside exactly one unit of work: one session, one
transaction, committed on success and rolled back on any exception.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.domain.interfaces import IProductRepository, IUserRepository
from storefront.infrastructure.repositories.product_repository import ProductRepository
from storefront.infrastructure.repositories.user_repository import UserRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface.

    All repositories are accessed through the UoW so they share the same
    session and transaction.
    """

    users: IUserRepository
    products: IProductRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None: ...


class UnitOfWork:
    """SQLAlchemy implementation of the Unit of Work pattern.

    Example:
        ```python
        async with UnitOfWork(session_factory) as uow:
            product = await uow.products.get_by_id(product_id)
            product.stock = 5
            await uow.products.update(product)
        ```
    """

    users: UserRepository
    products: ProductRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self.users = UserRepository(self._session)
        self.products = ProductRepository(self._session)
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        if self._session is None:
            return

        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        """Commit all changes in the current transaction.

        Raises:
            RuntimeError: If called outside of the context manager
        """
        if self._session is None:
            raise RuntimeError("Cannot commit: session not initialized")
        await self._session.commit()

    async def rollback(self) -> None:
        """Roll back all changes in the current transaction.

        Raises:
            RuntimeError: If called outside of the context manager
        """
        if self._session is None:
            raise RuntimeError("Cannot rollback: session not initialized")
        await self._session.rollback()
