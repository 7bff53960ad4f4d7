"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from storefront.domain.interfaces import IUserRepository
from storefront.domain.models.user import User
from storefront.infrastructure.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User], IUserRepository):
    """User-specific repository.

    The password hash is deferred on the model; only ``get_by_email`` with
    ``include_credentials=True`` loads it.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str, *, include_credentials: bool = False) -> User | None:
        """Retrieve user by email address.

        Args:
            email: Email address (matched case-insensitively)
            include_credentials: Also load ``password_hash`` for credential comparison

        Returns:
            User instance if found, None otherwise
        """
        query = select(User).where(User.email == email.strip().lower())
        if include_credentials:
            query = query.options(undefer(User.password_hash))
        result = await self._session.execute(query)
        return result.scalar_one_or_none()
