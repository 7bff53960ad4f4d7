"""Product domain model."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import JSON, Enum, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain.models.base import BaseEntity, enum_values
from storefront.infrastructure.constants import ProductLimits


if TYPE_CHECKING:
    from storefront.domain.models.user import User


class ProductStatus(StrEnum):
    """Listing states. ``out_of_stock`` is derived from stock, never chosen by sellers."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"


class Product(BaseEntity):
    """Product listing owned by a seller.

    Attributes:
        seller_id: ID of the owning seller
        seller: Owning seller, loaded alongside the product
        name: Listing title
        description: Listing body
        price: Unit price, two decimal places
        category: Free-form category label
        stock: Units available
        images: Hosted image URLs, in display order
        status: Listing status, kept consistent with stock
        rating: Average review rating (0-5)
        num_reviews: Number of reviews
    """

    __tablename__ = "products"

    seller_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning seller",
    )
    name: Mapped[str] = mapped_column(String(ProductLimits.MAX_NAME_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(
        String(ProductLimits.MAX_CATEGORY_LENGTH), nullable=False, index=True
    )
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[ProductStatus] = mapped_column(
        Enum(
            ProductStatus,
            name="product_status",
            native_enum=False,
            values_callable=enum_values,
            length=20,
        ),
        default=ProductStatus.ACTIVE,
        nullable=False,
    )
    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), default=Decimal("0"), nullable=False)
    num_reviews: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Loaded with every product read; sellers are never written through it
    seller: Mapped["User"] = relationship(lazy="joined", innerjoin=True, viewonly=True)

    __table_args__ = (
        Index("ix_products_status_created", "status", "created_at"),
        Index("ix_products_seller_status", "seller_id", "status"),
        Index("ix_products_price", "price"),
    )

    def apply_stock_rule(self) -> None:
        """Keep status consistent with stock.

        Empty stock always means ``out_of_stock``. Restocking an out-of-stock
        listing reactivates it; a seller-chosen ``inactive`` is left alone.
        """
        if self.stock is None:
            return
        if self.stock == 0:
            self.status = ProductStatus.OUT_OF_STOCK
        elif self.status in (None, ProductStatus.OUT_OF_STOCK):
            self.status = ProductStatus.ACTIVE

    def validation_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if self.price is None or self.price < 0:
            errors["price"] = "Price cannot be negative"
        elif self.price > ProductLimits.MAX_PRICE:
            errors["price"] = f"Price cannot exceed {ProductLimits.MAX_PRICE}"
        if self.stock is None or self.stock < 0:
            errors["stock"] = "Stock cannot be negative"
        if not self.images:
            errors["images"] = "Product must have at least one image"
        elif len(self.images) > ProductLimits.MAX_IMAGES:
            errors["images"] = f"Product cannot have more than {ProductLimits.MAX_IMAGES} images"
        if self.rating is not None and not (0 <= self.rating <= 5):
            errors["rating"] = "Rating must be between 0 and 5"
        return errors

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, status={self.status})>"


@dataclass(frozen=True, slots=True)
class SellerStats:
    """Inventory summary across one seller's listings."""

    total_products: int = 0
    active_products: int = 0
    inactive_products: int = 0
    out_of_stock_products: int = 0
    low_stock_products: int = 0
    total_stock: int = 0
    inventory_value: Decimal = Decimal("0")
