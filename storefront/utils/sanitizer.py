"""Input trimming and sensitive-data redaction.

Two kinds of sanitizing live here:
- ``trim_strings``: normalizes untrusted request input before validation
- ``sanitize_dict``/``sanitize_value``: redacts secrets before they reach
  logs (structlog processor) or traces (span processor)
"""

from collections.abc import Mapping
from typing import Any


# Sensitive field patterns that should be redacted in logs and spans
SENSITIVE_PATTERNS = {
    # Authentication & Authorization
    "password",
    "passwd",
    "pwd",
    "secret",
    "api_key",
    "apikey",
    "token",
    "jwt",
    "bearer",
    "authorization",
    "credentials",
    "signature",
    # Payment data
    "credit_card",
    "card_number",
    "cvv",
    # Database
    "connection_string",
    "database_url",
    # HTTP and database span attributes
    "http.request.header.authorization",
    "http.request.header.cookie",
    "http.response.header.set-cookie",
    "http.request.body",
    "http.response.body",
    "db.statement",
    "db.query.text",
    "db.query.parameters",
}

REDACTED = "***REDACTED***"


def trim_strings(value: Any) -> Any:
    """Return a copy of ``value`` with every string stripped of surrounding whitespace.

    Mappings and lists are walked recursively; other values pass through
    untouched. Never fails.

    Example:
        >>> trim_strings({"name": "  Lamp ", "tags": [" a ", 3]})
        {'name': 'Lamp', 'tags': ['a', 3]}
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        return {key: trim_strings(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [trim_strings(item) for item in value]
    return value


def is_sensitive_key(key: str, patterns: set[str] | None = None) -> bool:
    """Check if a key matches any sensitive pattern (case and separator insensitive).

    Example:
        >>> is_sensitive_key("Authorization")
        True
        >>> is_sensitive_key("http.url")
        False
    """
    if patterns is None:
        patterns = SENSITIVE_PATTERNS

    normalized_key = key.lower().replace("-", "_").replace(".", "_").replace(" ", "_")
    return any(
        pattern.replace(".", "_").replace("-", "_") in normalized_key for pattern in patterns
    )


def sanitize_value(
    key: str, value: Any, patterns: set[str] | None = None, show_length: bool = False
) -> Any:
    """Redact ``value`` if ``key`` is sensitive.

    Args:
        key: The key name
        value: The value to potentially redact
        patterns: Optional custom patterns (defaults to SENSITIVE_PATTERNS)
        show_length: Include the redacted string's length (useful in spans)
    """
    if not is_sensitive_key(key, patterns):
        return value
    if isinstance(value, str) and value and show_length:
        return f"***REDACTED({len(value)} chars)***"
    return REDACTED


def sanitize_dict(
    data: Mapping[str, Any],
    patterns: set[str] | None = None,
    recursive: bool = True,
    show_length: bool = False,
) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted.

    Example:
        >>> sanitize_dict({"user": {"password": "secret", "id": 123}})
        {'user': {'password': '***REDACTED***', 'id': 123}}
    """
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        if is_sensitive_key(key, patterns):
            sanitized[key] = sanitize_value(key, value, patterns, show_length)
        elif recursive and isinstance(value, Mapping):
            sanitized[key] = sanitize_dict(value, patterns, recursive, show_length)
        elif recursive and isinstance(value, list):
            sanitized[key] = [
                sanitize_dict(item, patterns, recursive, show_length)
                if isinstance(item, Mapping)
                else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized
