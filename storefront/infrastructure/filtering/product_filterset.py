"""Product filtering using FilterSet."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import ConfigDict, field_validator, model_validator

from storefront.domain.models.product import Product, ProductStatus
from storefront.infrastructure.constants import ProductLimits
from storefront.infrastructure.filtering.filterset import (
    CharFilter,
    FilterSet,
    NumberFilter,
    SearchFilter,
    UUIDFilter,
)


class ProductFilterSet(FilterSet):
    """Declarative filters for Product listings.

    Example query:
        GET /products?category=lighting&minPrice=10&maxPrice=50&search=lamp
    """

    model = Product
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    category: str | None = CharFilter(
        lookup="iexact",
        description="Filter by category (case-insensitive exact match)",
        max_length=ProductLimits.MAX_CATEGORY_LENGTH,
    )
    min_price: Decimal | None = NumberFilter(
        field_name="price",
        lookup="gte",
        description="Minimum price (inclusive)",
        alias="minPrice",
        ge=0,
    )
    max_price: Decimal | None = NumberFilter(
        field_name="price",
        lookup="lte",
        description="Maximum price (inclusive)",
        alias="maxPrice",
        ge=0,
    )
    search: str | None = SearchFilter(
        fields=("name", "description"),
        description="Case-insensitive search in name and description",
        max_length=ProductLimits.MAX_NAME_LENGTH,
    )
    seller_id: UUID | None = UUIDFilter(description="Filter by seller", alias="sellerId")
    status: ProductStatus | None = CharFilter(description="Filter by listing status")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty query parameters as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_price_range(self) -> "ProductFilterSet":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("minPrice cannot be greater than maxPrice")
        return self


class ProductSort:
    """Allowed sort keys; a leading ``-`` means descending."""

    FIELDS = ("created_at", "price", "name")
    DEFAULT = "-created_at"
    CHOICES = tuple(f"{prefix}{name}" for name in FIELDS for prefix in ("", "-"))

    @classmethod
    def parse(cls, sort: str) -> tuple[str, bool]:
        """Return (field, descending) for a sort key.

        Raises:
            ValueError: If the key is not allowed
        """
        if sort not in cls.CHOICES:
            raise ValueError(f"sort must be one of {', '.join(cls.CHOICES)}")
        return sort.lstrip("-"), sort.startswith("-")
