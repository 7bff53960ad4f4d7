"""Declarative filtering for SQLAlchemy models.

A FilterSet is a pydantic model whose fields carry filter metadata. Validated
query parameters become a FilterSet instance, and ``apply`` turns every
non-null field into a WHERE clause.

Example:
    class ProductFilterSet(FilterSet):
        model = Product

        category: str | None = CharFilter(lookup="iexact")
        min_price: Decimal | None = NumberFilter(field_name="price", lookup="gte")
        search: str | None = SearchFilter(fields=("name", "description"))

    query = ProductFilterSet(category="Lamps").apply(select(Product))
"""

from collections.abc import Sequence
from typing import Any, ClassVar

from pydantic import BaseModel, Field
from sqlalchemy import Select, and_, func, or_


class FilterDescriptor:
    """Filter metadata attached to a FilterSet field."""

    def __init__(
        self,
        *,
        field_name: str | None = None,
        lookup: str = "exact",
        fields: Sequence[str] = (),
    ):
        self.field_name = field_name
        self.lookup = lookup
        self.fields = tuple(fields)

    def get_filter_expression(self, model: type, value: Any) -> Any:  # type: ignore
        """Build the SQLAlchemy expression for ``value``."""
        if value is None:
            return None

        if self.lookup == "search":
            return or_(
                *(getattr(model, name).icontains(value, autoescape=True) for name in self.fields)
            )

        column = getattr(model, self.field_name)  # type: ignore[arg-type]
        if self.lookup == "exact":
            return column == value
        if self.lookup == "iexact":
            return func.lower(column) == func.lower(value)
        if self.lookup == "icontains":
            return column.icontains(value, autoescape=True)
        if self.lookup == "istartswith":
            return column.istartswith(value, autoescape=True)
        if self.lookup == "gt":
            return column > value
        if self.lookup == "gte":
            return column >= value
        if self.lookup == "lt":
            return column < value
        if self.lookup == "lte":
            return column <= value
        if self.lookup == "in":
            return column.in_(value)
        raise ValueError(f"Unknown lookup type: {self.lookup}")


def _filter_field(descriptor: FilterDescriptor, description: str | None, **field_kwargs: Any) -> Any:
    return Field(
        default=None,
        description=description,
        json_schema_extra={"_filter": descriptor},
        **field_kwargs,
    )


def CharFilter(
    *,
    field_name: str | None = None,
    lookup: str = "exact",
    description: str | None = None,
    **field_kwargs: Any,
) -> Any:
    """Create a string filter (exact, iexact, icontains, istartswith, in)."""
    return _filter_field(
        FilterDescriptor(field_name=field_name, lookup=lookup), description, **field_kwargs
    )


def NumberFilter(
    *,
    field_name: str | None = None,
    lookup: str = "exact",
    description: str | None = None,
    **field_kwargs: Any,
) -> Any:
    """Create a numeric filter (exact, gt, gte, lt, lte)."""
    return _filter_field(
        FilterDescriptor(field_name=field_name, lookup=lookup), description, **field_kwargs
    )


def UUIDFilter(
    *,
    field_name: str | None = None,
    description: str | None = None,
    **field_kwargs: Any,
) -> Any:
    """Create an exact-match UUID filter."""
    return _filter_field(
        FilterDescriptor(field_name=field_name, lookup="exact"), description, **field_kwargs
    )


def SearchFilter(
    *,
    fields: Sequence[str],
    description: str | None = None,
    **field_kwargs: Any,
) -> Any:
    """Create a case-insensitive substring search across several columns."""
    return _filter_field(
        FilterDescriptor(lookup="search", fields=fields), description, **field_kwargs
    )


class FilterSet(BaseModel):
    """Base class for declarative filtersets.

    Subclasses set ``model`` and declare filters as fields. Fields without
    filter metadata (page, limit, sort) are ignored by ``apply``.
    """

    model: ClassVar[type] = None  # Override in subclass

    def _descriptors(self) -> list[tuple[str, FilterDescriptor]]:
        descriptors = []
        for field_name, field_info in self.__class__.model_fields.items():
            json_extra = field_info.json_schema_extra or {}
            descriptor = json_extra.get("_filter") if isinstance(json_extra, dict) else None
            if isinstance(descriptor, FilterDescriptor):
                if descriptor.field_name is None:
                    descriptor.field_name = field_name
                descriptors.append((field_name, descriptor))
        return descriptors

    def apply(self, query: Select) -> Select:  # type: ignore
        """Add a WHERE clause for every filter that has a value."""
        if self.model is None:
            raise ValueError("model class variable must be set")

        expressions = []
        for field_name, descriptor in self._descriptors():
            expr = descriptor.get_filter_expression(self.model, getattr(self, field_name, None))
            if expr is not None:
                expressions.append(expr)

        if expressions:
            query = query.where(and_(*expressions))
        return query
