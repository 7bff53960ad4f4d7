"""Test data factories for creating domain objects.

Factories build unsaved entities with sensible defaults; override only what a
test cares about.
"""

from datetime import UTC, datetime
from decimal import Decimal
from itertools import count
from typing import Any
from uuid import UUID

from uuid_extension import uuid7

from storefront.domain.models.product import Product, ProductStatus
from storefront.domain.models.user import AccountStatus, Role, User
from storefront.domain.principal import Principal


_sequence = count(1)


def user_factory(
    id: UUID | None = None,
    name: str = "Test User",
    email: str | None = None,
    role: Role = Role.CUSTOMER,
    status: AccountStatus = AccountStatus.ACTIVE,
    password_hash: str = "$2b$04$placeholderplaceholderplaceholderplaceholderplac",
    **kwargs: Any,
) -> User:
    """Factory function for creating User instances.

    Examples:
        >>> seller = user_factory(role=Role.SELLER)
        >>> assert seller.role == Role.SELLER
    """
    now = datetime.now(UTC)
    return User(
        id=id or uuid7(),
        name=name,
        email=email or f"user{next(_sequence)}@example.com",
        password_hash=password_hash,
        role=role,
        status=status,
        email_verified=kwargs.pop("email_verified", False),
        created_at=kwargs.pop("created_at", now),
        updated_at=kwargs.pop("updated_at", now),
        **kwargs,
    )


def product_factory(
    id: UUID | None = None,
    seller_id: UUID | None = None,
    name: str = "Desk Lamp",
    price: Decimal = Decimal("19.99"),
    stock: int = 5,
    status: ProductStatus | None = ProductStatus.ACTIVE,
    **kwargs: Any,
) -> Product:
    """Factory function for creating Product instances.

    Examples:
        >>> product = product_factory(stock=0)
        >>> product.apply_stock_rule()
        >>> assert product.status == ProductStatus.OUT_OF_STOCK
    """
    now = datetime.now(UTC)
    return Product(
        id=id or uuid7(),
        seller_id=seller_id or uuid7(),
        name=name,
        description=kwargs.pop("description", "An adjustable lamp for any desk"),
        price=price,
        category=kwargs.pop("category", "Lighting"),
        stock=stock,
        images=kwargs.pop("images", ["https://res.cloudinary.com/demo/image/upload/lamp.jpg"]),
        status=status,
        rating=kwargs.pop("rating", Decimal("0")),
        num_reviews=kwargs.pop("num_reviews", 0),
        created_at=kwargs.pop("created_at", now),
        updated_at=kwargs.pop("updated_at", now),
        **kwargs,
    )


def principal_factory(
    id: UUID | None = None,
    role: Role = Role.SELLER,
    status: AccountStatus = AccountStatus.ACTIVE,
) -> Principal:
    """Factory function for creating an authenticated caller."""
    return Principal(
        id=id or uuid7(),
        name="Caller",
        email=f"caller{next(_sequence)}@example.com",
        role=role,
        status=status,
    )


def product_payload(**overrides: Any) -> dict[str, Any]:
    """Valid JSON body for ``POST /products``."""
    payload: dict[str, Any] = {
        "name": "Desk Lamp",
        "description": "Adjustable LED desk lamp with dimmer",
        "price": 39.99,
        "category": "Lighting",
        "stock": 25,
        "images": ["data:image/png;base64,iVBORw0KGgo="],
    }
    payload.update(overrides)
    return payload
