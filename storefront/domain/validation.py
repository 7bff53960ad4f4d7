"""Schema validation returning a tagged result instead of raising.

``validate_payload`` runs a pydantic model over untrusted input and reports
every violation in one pass, so a client fixing a form sees all of its
mistakes at once.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails


@dataclass(frozen=True, slots=True)
class Violation:
    """A single rule violation.

    Attributes:
        field: Dot path of the offending field (e.g. ``images.0``)
        message: Human-readable reason
    """

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful validation carrying the normalized value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err:
    """Failed validation carrying every violation found."""

    violations: tuple[Violation, ...]


type ValidationResult[T] = Ok[T] | Err


def _field_path(loc: Sequence[int | str], root: str) -> str:
    return ".".join(str(part) for part in loc) or root


def _message(error: ErrorDetails, field: str) -> str:
    if error["type"] == "missing":
        return f'"{field}" is required'
    if error["type"] == "value_error" and "ctx" in error:
        return str(error["ctx"].get("error", error["msg"]))
    return error["msg"]


def violations_from_errors(
    errors: Sequence[ErrorDetails], *, root: str = "body", skip_prefix: Sequence[str] = ()
) -> tuple[Violation, ...]:
    """Convert pydantic error details into violations.

    Args:
        errors: Output of ``ValidationError.errors()``
        root: Field name used for model-level errors with an empty location
        skip_prefix: Leading location parts to drop (FastAPI prefixes ``body``/``query``)
    """
    violations = []
    for error in errors:
        loc = list(error["loc"])
        if loc and loc[0] in skip_prefix:
            loc = loc[1:]
        field = _field_path(loc, root)
        violations.append(Violation(field=field, message=_message(error, field)))
    return tuple(violations)


def validate_payload[M: BaseModel](
    schema: type[M], payload: Mapping[str, Any] | None, *, root: str = "body"
) -> ValidationResult[M]:
    """Validate a raw mapping against a schema.

    Unknown keys are dropped and values are coerced according to the schema's
    own configuration.

    Args:
        schema: Pydantic model describing the accepted shape
        payload: Raw, already sanitized input
        root: Field name reported for model-level violations

    Returns:
        ``Ok`` with the normalized model, or ``Err`` with all violations
    """
    try:
        return Ok(schema.model_validate(dict(payload or {})))
    except PydanticValidationError as exc:
        return Err(violations_from_errors(exc.errors(), root=root))
