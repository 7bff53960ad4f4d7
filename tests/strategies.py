"""Hypothesis strategies for property-based testing.

Usage:
    from hypothesis import given
    from tests.strategies import page_window_strategy

    @given(window=page_window_strategy())
    def test_page_info_property(window):
        ...
"""

from decimal import Decimal

from hypothesis import strategies as st

from storefront.infrastructure.constants import PaginationDefaults, ProductLimits


# ============================================================================
# Basic Strategies
# ============================================================================


@st.composite
def error_message_strategy(draw: st.DrawFn) -> str:
    """Generate non-empty, printable error messages."""
    return draw(
        st.text(
            alphabet=st.characters(min_codepoint=32, max_codepoint=126),
            min_size=1,
            max_size=120,
        ).filter(lambda s: s.strip())
    )


@st.composite
def padded_text_strategy(draw: st.DrawFn) -> tuple[str, str]:
    """Generate (padded, core) pairs where ``padded`` is ``core`` with outer whitespace.

    Example:
        >>> @given(pair=padded_text_strategy())
        ... def test_trim(pair):
        ...     padded, core = pair
        ...     assert padded.strip() == core
    """
    core = draw(st.text(min_size=0, max_size=30).map(str.strip))
    left = draw(st.text(alphabet=" \t\n", max_size=3))
    right = draw(st.text(alphabet=" \t\n", max_size=3))
    return f"{left}{core}{right}", core


# ============================================================================
# Domain Strategies
# ============================================================================


@st.composite
def page_window_strategy(draw: st.DrawFn) -> tuple[int, int, int]:
    """Generate (page, limit, total_items) triples within allowed bounds."""
    page = draw(st.integers(min_value=1, max_value=500))
    limit = draw(st.integers(min_value=1, max_value=PaginationDefaults.MAX_LIMIT))
    total = draw(st.integers(min_value=0, max_value=10_000))
    return page, limit, total


@st.composite
def stock_strategy(draw: st.DrawFn) -> int:
    """Generate stock levels, biased towards the interesting boundaries."""
    return draw(
        st.one_of(
            st.just(0),
            st.integers(min_value=1, max_value=ProductLimits.LOW_STOCK_THRESHOLD),
            st.integers(min_value=0, max_value=100_000),
        )
    )


@st.composite
def price_strategy(draw: st.DrawFn) -> Decimal:
    """Generate valid two-decimal prices."""
    cents = draw(st.integers(min_value=1, max_value=ProductLimits.MAX_PRICE * 100))
    return Decimal(cents) / 100
