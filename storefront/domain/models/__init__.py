"""Domain models."""

from storefront.domain.models.base import Base, BaseEntity
from storefront.domain.models.product import Product, ProductStatus, SellerStats
from storefront.domain.models.user import AccountStatus, Role, User


__all__ = [
    "AccountStatus",
    "Base",
    "BaseEntity",
    "Product",
    "ProductStatus",
    "Role",
    "SellerStats",
    "User",
]
