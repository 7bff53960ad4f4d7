"""CORS configuration for browser storefront clients."""

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from storefront.infrastructure.config import Settings


# Emitted by slowapi when headers_enabled is on
RATE_LIMIT_HEADERS = ("X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset", "Retry-After")


def exposed_headers(settings: Settings) -> list[str]:
    """Configured expose headers plus the rate-limit headers, without duplicates."""
    headers = list(settings.cors_expose_headers)
    if settings.rate_limit_enabled:
        headers += [h for h in RATE_LIMIT_HEADERS if h not in headers]
    return headers


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured storefront origins to call the API.

    Browsers reject credentialed responses for a wildcard origin, so
    credentials are switched off when ``*`` is configured.
    """
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials and not wildcard,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=exposed_headers(settings),
    )
