"""Product API request and response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator, model_validator

from storefront.domain.models.product import ProductStatus
from storefront.domain.pagination import PageParams
from storefront.infrastructure.constants import ProductLimits
from storefront.infrastructure.filtering.product_filterset import ProductFilterSet, ProductSort
from storefront.presentation.schemas.common import CamelModel, Money, PageResponse, RequestModel


ImageRef = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

Price = Annotated[
    Decimal,
    Field(gt=0, le=ProductLimits.MAX_PRICE, decimal_places=2, description="Unit price"),
]


class ProductCreate(RequestModel):
    """Request schema for publishing a product. Every field is required."""

    name: str = Field(
        ...,
        min_length=ProductLimits.MIN_NAME_LENGTH,
        max_length=ProductLimits.MAX_NAME_LENGTH,
    )
    description: str = Field(
        ...,
        min_length=ProductLimits.MIN_DESCRIPTION_LENGTH,
        max_length=ProductLimits.MAX_DESCRIPTION_LENGTH,
    )
    price: Price
    category: str = Field(
        ...,
        min_length=ProductLimits.MIN_CATEGORY_LENGTH,
        max_length=ProductLimits.MAX_CATEGORY_LENGTH,
    )
    stock: int = Field(..., ge=0, description="Units available")
    images: list[ImageRef] = Field(
        ...,
        min_length=ProductLimits.MIN_IMAGES,
        max_length=ProductLimits.MAX_IMAGES,
        description="Data URIs or URLs of product images",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Desk Lamp",
                    "description": "Adjustable LED desk lamp with dimmer",
                    "price": 39.99,
                    "category": "Lighting",
                    "stock": 25,
                    "images": ["data:image/png;base64,iVBORw0KGgo="],
                }
            ]
        }
    }


class ProductUpdate(RequestModel):
    """Request schema for a partial product update.

    Sellers may switch a listing between active and inactive; out_of_stock is
    always derived from stock.
    """

    name: str | None = Field(
        None, min_length=ProductLimits.MIN_NAME_LENGTH, max_length=ProductLimits.MAX_NAME_LENGTH
    )
    description: str | None = Field(
        None,
        min_length=ProductLimits.MIN_DESCRIPTION_LENGTH,
        max_length=ProductLimits.MAX_DESCRIPTION_LENGTH,
    )
    price: Price | None = None
    category: str | None = Field(
        None,
        min_length=ProductLimits.MIN_CATEGORY_LENGTH,
        max_length=ProductLimits.MAX_CATEGORY_LENGTH,
    )
    stock: int | None = Field(None, ge=0)
    images: list[ImageRef] | None = Field(
        None, min_length=ProductLimits.MIN_IMAGES, max_length=ProductLimits.MAX_IMAGES
    )
    status: Literal["active", "inactive"] | None = None

    @model_validator(mode="after")
    def require_some_field(self) -> "ProductUpdate":
        if not self.changes():
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent with a non-null value."""
        changes = self.model_dump(exclude_unset=True, exclude_none=True)
        if "status" in changes:
            changes["status"] = ProductStatus(changes["status"])
        return changes


class ProductListQuery(ProductFilterSet, PageParams):
    """Query parameters for product listings: filters, paging and sort."""

    sort: str = Field(
        default=ProductSort.DEFAULT,
        description=f"Sort key, one of {', '.join(ProductSort.CHOICES)}",
    )

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v: str) -> str:
        ProductSort.parse(v)
        return v


class SellerSummary(CamelModel):
    """Public view of the seller behind a listing."""

    id: UUID
    name: str


class ProductResponse(CamelModel):
    """Product as returned by the API."""

    id: UUID
    seller_id: UUID
    seller: SellerSummary | None = Field(None, description="Owning seller, id and name only")
    name: str
    description: str
    price: Money
    category: str
    stock: int
    images: list[str]
    status: ProductStatus
    rating: Money
    num_reviews: int
    created_at: datetime
    updated_at: datetime


class SellerStatsResponse(CamelModel):
    """Inventory totals for a seller."""

    total_products: int
    active_products: int
    inactive_products: int
    out_of_stock_products: int
    low_stock_products: int = Field(..., description="Products with 1-9 units left")
    total_stock: int
    inventory_value: Money = Field(..., description="Sum of price x stock")


class SellerProductsResponse(PageResponse[ProductResponse]):
    """Seller dashboard envelope: own listings, paging and inventory stats."""

    stats: SellerStatsResponse
