"""Global exception handling for the FastAPI application.

Every failure, whether raised by a use case, the persistence layer, the token
library or FastAPI itself, is first normalized into a ``DomainException`` and
then rendered through one function into the ``ErrorResponse`` envelope.
"""

import re
import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from authlib.jose.errors import ExpiredTokenError, JoseError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    InternalError,
    ValidationError,
)
from storefront.domain.validation import violations_from_errors
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.logging.config import get_logger
from storefront.infrastructure.persistence.errors import (
    MalformedIdentifierError,
    RecordValidationError,
)
from storefront.presentation.schemas.error import ErrorItem, ErrorResponse


logger = get_logger(__name__)

ExceptionHandler = Callable[[Request, Any], Awaitable[JSONResponse]]

UNIQUE_VIOLATION_SQLSTATE = "23505"

# Driver messages for unique violations: PostgreSQL, then SQLite
_UNIQUE_VIOLATION_MESSAGES = (
    "duplicate key value violates unique constraint",
    "UNIQUE constraint failed",
)

# Postgres: "Key (email)=(a@b.c) already exists"; SQLite: "UNIQUE constraint failed: users.email"
_DUPLICATE_KEY_PATTERNS = (
    re.compile(r"Key \((\w+)\)="),
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"ix_\w+?_(\w+)"),
)

_HTTP_KINDS: dict[int, type[DomainException]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: EntityNotFoundError,
    409: ConflictError,
}


def is_unique_violation(exc: IntegrityError) -> bool:
    """Whether the integrity failure is a duplicate key rather than FK, NOT NULL or CHECK."""
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    text = str(exc.orig)
    return any(marker in text for marker in _UNIQUE_VIOLATION_MESSAGES)


def duplicate_field(exc: IntegrityError) -> str | None:
    """Extract the column name from a unique-constraint violation, if any."""
    if not is_unique_violation(exc):
        return None
    text = str(exc.orig)
    for pattern in _DUPLICATE_KEY_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _from_http_exception(exc: StarletteHTTPException) -> DomainException:
    detail = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code in _HTTP_KINDS:
        error_cls = _HTTP_KINDS[exc.status_code]
        if error_cls is EntityNotFoundError:
            # Starlette only raises 404 for unmatched paths
            return EntityNotFoundError("Route")
        return error_cls(detail)
    if exc.status_code < 500:
        return ValidationError(detail, status_code=exc.status_code)
    return InternalError(status_code=exc.status_code)


def normalize_exception(exc: Exception) -> DomainException:
    """Map any exception onto the domain error taxonomy.

    Unrecognized exceptions become a generic ``InternalError`` so that no
    implementation detail reaches the client.
    """
    match exc:
        case DomainException():
            return exc
        case RequestValidationError():
            violations = violations_from_errors(
                exc.errors(), skip_prefix=("body", "query", "path")
            )
            return ValidationError(details=[v.to_dict() for v in violations])
        case MalformedIdentifierError():
            return EntityNotFoundError()
        case RecordValidationError():
            return ValidationError(str(exc))
        case IntegrityError() if is_unique_violation(exc):
            field = duplicate_field(exc)
            return ConflictError(f"{field} already exists" if field else None)
        case ExpiredTokenError():
            return AuthenticationError("Token expired")
        case JoseError():
            return AuthenticationError("Invalid token")
        case StarletteHTTPException():
            return _from_http_exception(exc)
        case _:
            return InternalError()


def _debug_fields(request: Request, original: Exception) -> dict[str, Any]:
    return {
        "stack": "".join(
            traceback.format_exception(type(original), original, original.__traceback__)
        ),
        "error": {"type": type(original).__name__, "message": str(original)},
        "request": {
            "method": request.method,
            "url": str(request.url),
            "path_params": dict(request.path_params),
            "query_params": dict(request.query_params),
        },
    }


def render_error(
    request: Request, error: DomainException, original: Exception, settings: Settings
) -> JSONResponse:
    """Render a normalized error as the uniform JSON envelope.

    4xx outcomes are logged as warnings, 5xx with the traceback.
    """
    log_fields = {
        "kind": error.kind.value,
        "status_code": error.status_code,
        "exception_type": type(original).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if error.status_code >= 500:
        logger.exception("request_failed", error=str(original), **log_fields, exc_info=original)
    else:
        logger.warning("request_rejected", message=error.message, **log_fields)

    body = ErrorResponse(
        message=error.message,
        errors=[ErrorItem(**item) for item in error.details] if error.details else None,
        **(_debug_fields(request, original) if settings.is_development else {}),
    )
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=getattr(original, "headers", None),
    )


def build_exception_handler(settings: Settings) -> ExceptionHandler:
    """Create the single handler every exception type is routed through."""

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        return render_error(request, normalize_exception(exc), exc, settings)

    return handle


def setup_exception_handlers(app: FastAPI, settings: Settings | None = None) -> None:
    """Register the error funnel for every exception family.

    Args:
        app: FastAPI application instance
        settings: Controls whether development diagnostics are included
    """
    handler = build_exception_handler(settings or get_settings())

    app.add_exception_handler(DomainException, handler)
    app.add_exception_handler(RequestValidationError, handler)
    app.add_exception_handler(StarletteHTTPException, handler)
    app.add_exception_handler(IntegrityError, handler)
    app.add_exception_handler(MalformedIdentifierError, handler)
    app.add_exception_handler(RecordValidationError, handler)
    app.add_exception_handler(JoseError, handler)

    # Catch-all, served by Starlette's ServerErrorMiddleware
    app.add_exception_handler(Exception, handler)
