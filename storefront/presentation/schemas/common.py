"""Shared schema building blocks and success envelopes.

Every successful response is wrapped as ``{"success": true, ...}``; JSON keys
are camelCase.
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from storefront.domain.pagination import PageInfo


T = TypeVar("T")

# Decimals are stored exactly but rendered as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base for response models: camelCase aliases, built from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(BaseModel):
    """Base for request bodies: unknown keys dropped, strings trimmed."""

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class PaginationResponse(CamelModel):
    """Position of the returned page within the full result set."""

    current_page: int = Field(..., description="Current page (1-indexed)")
    total_pages: int = Field(..., description="Total number of pages")
    total_items: int = Field(..., description="Total number of matching items")
    has_next: bool = Field(..., description="Whether a next page exists")
    has_prev: bool = Field(..., description="Whether a previous page exists")

    @classmethod
    def from_page_info(cls, info: PageInfo) -> "PaginationResponse":
        return cls.model_validate(info)


class MessageResponse(CamelModel):
    """Envelope carrying only a confirmation message."""

    success: bool = True
    message: str


class DataResponse(CamelModel, Generic[T]):
    """Envelope carrying a single payload."""

    success: bool = True
    data: T


class MessageDataResponse(CamelModel, Generic[T]):
    """Envelope carrying a payload and a confirmation message."""

    success: bool = True
    message: str
    data: T


class PageResponse(CamelModel, Generic[T]):
    """Envelope carrying one page of items."""

    success: bool = True
    data: list[T]
    pagination: PaginationResponse
