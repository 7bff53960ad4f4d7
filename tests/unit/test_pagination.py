"""Tests for pagination metadata.

Test Organization:
- TestPageInfo: Page counting and navigation flags
- TestPageParams: Offset computation and bounds
"""

import pytest
from hypothesis import given
from pydantic import ValidationError

from storefront.domain.pagination import PageInfo, PageParams
from tests.strategies import page_window_strategy


class TestPageInfo:
    """Test PageInfo.build."""

    @pytest.mark.parametrize(
        ("page", "limit", "total", "expected"),
        [
            (1, 10, 25, (3, True, False)),
            (3, 10, 25, (3, False, True)),
            (2, 10, 20, (2, False, True)),
            (1, 10, 0, (0, False, False)),
            (4, 10, 25, (3, False, True)),
        ],
    )
    def test_builds_metadata(
        self, page: int, limit: int, total: int, expected: tuple[int, bool, bool]
    ) -> None:
        """Test total pages and navigation flags for representative windows.

        Arrange: Page, limit and total item count
        Act: Build PageInfo
        Assert: total_pages, has_next and has_prev match
        """
        # Act
        info = PageInfo.build(page, limit, total)

        # Assert
        assert (info.total_pages, info.has_next, info.has_prev) == expected
        assert info.current_page == page
        assert info.total_items == total

    @given(window=page_window_strategy())
    def test_invariants(self, window: tuple[int, int, int]) -> None:
        """Property: pages cover every item with less than one page to spare."""
        page, limit, total = window

        info = PageInfo.build(page, limit, total)

        assert info.total_pages * limit >= total
        assert (info.total_pages - 1) * limit < total or info.total_pages == 0
        assert info.has_next == (page < info.total_pages)
        assert info.has_prev == (page > 1)


class TestPageParams:
    """Test PageParams."""

    def test_offset(self) -> None:
        """Test offset skips the previous pages."""
        assert PageParams(page=3, limit=10).offset == 20

    def test_defaults(self) -> None:
        """Test default page 1 of 10 items."""
        params = PageParams()

        assert (params.page, params.limit, params.offset) == (1, 10, 0)

    @pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (1, 101)])
    def test_rejects_out_of_range(self, page: int, limit: int) -> None:
        """Test page below 1 and limit outside 1..100 are refused."""
        with pytest.raises(ValidationError):
            PageParams(page=page, limit=limit)
