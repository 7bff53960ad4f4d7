"""Offset pagination for listing endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import BaseModel, Field

from storefront.infrastructure.constants import PaginationDefaults


class PageParams(BaseModel):
    """Page/limit query parameters (1-indexed pages)."""

    page: int = Field(
        default=PaginationDefaults.DEFAULT_PAGE,
        ge=1,
        description="Page number, starting at 1",
    )
    limit: int = Field(
        default=PaginationDefaults.DEFAULT_LIMIT,
        ge=1,
        le=PaginationDefaults.MAX_LIMIT,
        description="Number of items per page",
    )

    @property
    def offset(self) -> int:
        """Number of rows to skip before this page."""
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class PageInfo:
    """Position of a page within the full result set."""

    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> PageInfo:
        """Compute page metadata for a result set of ``total_items`` rows.

        Example:
            >>> PageInfo.build(page=3, limit=10, total_items=25)
            PageInfo(current_page=3, total_pages=3, total_items=25, has_next=False, has_prev=True)
        """
        total_pages = math.ceil(total_items / limit) if total_items else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass(frozen=True, slots=True)
class Page[T]:
    """One page of items plus its position."""

    items: list[T]
    info: PageInfo
