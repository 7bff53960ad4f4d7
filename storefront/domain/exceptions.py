"""Domain exceptions.

Every failure that reaches a client is expressed as exactly one of the
exceptions below. Each carries a kind and an HTTP status; the error handlers
in the presentation layer only translate them into the response envelope.
"""

from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Closed set of error kinds surfaced to clients."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class DomainException(Exception):
    """Base exception for all domain errors.

    Attributes:
        kind: Error kind, fixed per subclass
        status_code: HTTP status, defaults per subclass and may be overridden
        message: Client-facing message
        details: Optional structured details (field violations for validation)
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    default_status: ClassVar[int] = 500
    default_message: ClassVar[str] = "Internal Server Error"

    def __init__(
        self,
        message: str | None = None,
        details: Any = None,
        *,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details
        self.status_code = status_code or self.default_status
        super().__init__(self.message)


class ValidationError(DomainException):
    """Raised when input violates a schema or a record-level rule."""

    kind = ErrorKind.VALIDATION
    default_status = 400
    default_message = "Validation Error"


class AuthenticationError(DomainException):
    """Raised when the caller's identity cannot be established."""

    kind = ErrorKind.AUTHENTICATION
    default_status = 401
    default_message = "Authentication failed"


class AuthorizationError(DomainException):
    """Raised when an authenticated caller may not perform an action."""

    kind = ErrorKind.AUTHORIZATION
    default_status = 403
    default_message = "Not authorized to perform this action"


class EntityNotFoundError(DomainException):
    """Raised when a requested entity does not exist.

    Args:
        resource: Human-readable resource name, rendered as "<resource> not found"
    """

    kind = ErrorKind.NOT_FOUND
    default_status = 404
    default_message = "Resource not found"

    def __init__(
        self, resource: str = "Resource", details: Any = None, *, status_code: int | None = None
    ) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found", details, status_code=status_code)


class ConflictError(DomainException):
    """Raised when a write collides with an existing record."""

    kind = ErrorKind.CONFLICT
    default_status = 409
    default_message = "Resource conflict"


class InternalError(DomainException):
    """Raised for failures the client cannot correct."""

    kind = ErrorKind.INTERNAL
    default_status = 500
    default_message = "Internal Server Error"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: ValidationError.default_status,
    ErrorKind.AUTHENTICATION: AuthenticationError.default_status,
    ErrorKind.AUTHORIZATION: AuthorizationError.default_status,
    ErrorKind.NOT_FOUND: EntityNotFoundError.default_status,
    ErrorKind.CONFLICT: ConflictError.default_status,
    ErrorKind.INTERNAL: InternalError.default_status,
}
