"""Declarative filtering system for SQLAlchemy models."""

from storefront.infrastructure.filtering.filterset import (
    CharFilter,
    FilterSet,
    NumberFilter,
    SearchFilter,
    UUIDFilter,
)
from storefront.infrastructure.filtering.product_filterset import ProductFilterSet, ProductSort


__all__ = [
    "CharFilter",
    "FilterSet",
    "NumberFilter",
    "ProductFilterSet",
    "ProductSort",
    "SearchFilter",
    "UUIDFilter",
]
