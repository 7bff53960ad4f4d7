"""Storage-layer failures.

These are raised below the use cases and translated into domain errors by the
API error handlers.
"""

from collections.abc import Mapping


class StorageError(Exception):
    """Base class for persistence failures that are not database driver errors."""


class MalformedIdentifierError(StorageError):
    """Raised when a lookup key cannot be parsed as a record identifier."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Malformed identifier: {value!r}")


class RecordValidationError(StorageError):
    """Raised at flush time when a record breaks a field rule.

    Args:
        errors: Mapping of field name to message
    """

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(", ".join(self.errors.values()))
