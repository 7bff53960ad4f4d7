"""Mapper hooks run on every insert and update.

Products get their stock-driven status recomputed, then every entity is checked
against its own field rules before SQL is emitted.
"""

from typing import Any

from sqlalchemy import event

from storefront.domain.models.base import BaseEntity
from storefront.domain.models.product import Product
from storefront.infrastructure.persistence.errors import RecordValidationError


def _check_record(_mapper: Any, _connection: Any, target: BaseEntity) -> None:
    errors = target.validation_errors()
    if errors:
        raise RecordValidationError(errors)


def _apply_product_rules(_mapper: Any, _connection: Any, target: Product) -> None:
    target.apply_stock_rule()


def register_model_events() -> None:
    """Attach the hooks. Safe to call more than once."""
    for hook in ("before_insert", "before_update"):
        if not event.contains(Product, hook, _apply_product_rules):
            event.listen(Product, hook, _apply_product_rules)
        if not event.contains(BaseEntity, hook, _check_record):
            event.listen(BaseEntity, hook, _check_record, propagate=True)
