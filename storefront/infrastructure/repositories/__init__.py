"""Repository implementations."""

from storefront.infrastructure.repositories.base_repository import BaseRepository
from storefront.infrastructure.repositories.product_repository import ProductRepository
from storefront.infrastructure.repositories.user_repository import UserRepository


__all__ = ["BaseRepository", "ProductRepository", "UserRepository"]
