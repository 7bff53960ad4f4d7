"""Infrastructure layer containing implementations."""

__all__ = [
    "config",
    "filtering",
    "logging",
    "patterns",
    "persistence",
    "repositories",
    "security",
    "telemetry",
]
