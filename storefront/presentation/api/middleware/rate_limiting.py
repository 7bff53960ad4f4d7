"""Rate limiting using SlowAPI.

Every route shares one per-client budget enforced by ``SlowAPIMiddleware``.
Sign-up/sign-in and product creation carry a tighter budget of their own,
enforced by the ``rate_limited`` route dependency. Redis is the storage
backend in deployed environments so that all instances see the same counters.
"""

import math
import time
from collections.abc import AsyncIterator, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from limits import RateLimitItem, parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging.config import get_logger
from storefront.presentation.schemas.error import ErrorResponse


logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
AUTH_RATE_LIMIT_MESSAGE = "Too many authentication attempts, please try again later."
PRODUCT_CREATION_RATE_LIMIT_MESSAGE = "Too many product creations, please try again later."

AUTH_SCOPE = "auth"
PRODUCT_CREATION_SCOPE = "product-creation"

# slowapi invokes exception handlers synchronously
RateLimitHandler = Callable[[Request, Any], Response]


class RouteRateLimitExceeded(Exception):
    """Raised when a route budget is spent."""

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after


@dataclass(frozen=True)
class RouteBudget:
    """A named limit shared by the routes that declare it.

    With ``failures_only`` the budget is checked up front but only charged
    when the request fails, so successful requests never use it up.
    """

    scope: str
    limit: RateLimitItem
    message: str
    failures_only: bool = False


class RouteRateLimiter:
    """Fixed-window counters for route budgets, keyed by scope and client."""

    def __init__(self, storage_uri: str, budgets: Iterable[RouteBudget]) -> None:
        self._strategy = FixedWindowRateLimiter(storage_from_string(storage_uri))
        self._budgets = {budget.scope: budget for budget in budgets}

    def acquire(self, scope: str, client: str) -> None:
        """Admit a request or raise ``RouteRateLimitExceeded``."""
        budget = self._budgets[scope]
        if budget.failures_only:
            allowed = self._strategy.test(budget.limit, scope, client)
        else:
            allowed = self._strategy.hit(budget.limit, scope, client)
        if not allowed:
            raise RouteRateLimitExceeded(budget.message, self.retry_after(scope, client))

    def record_failure(self, scope: str, client: str) -> None:
        budget = self._budgets[scope]
        if budget.failures_only:
            self._strategy.hit(budget.limit, scope, client)

    def retry_after(self, scope: str, client: str) -> int:
        """Seconds until the client's window for ``scope`` resets."""
        reset_time, _ = self._strategy.get_window_stats(self._budgets[scope].limit, scope, client)
        return seconds_until(reset_time)


def seconds_until(reset_time: float) -> int:
    return max(1, math.ceil(reset_time - time.time()))


def get_client_identifier(request: Request) -> str:
    """Get client identifier for rate limiting.

    Uses the client IP resolved by ``RequestContextMiddleware`` (proxy headers
    included) and falls back to the socket peer address.
    """
    if hasattr(request.state, "client_ip"):
        return str(request.state.client_ip)
    return str(get_remote_address(request))


def get_limiter(settings: Settings) -> Limiter:
    """Create the rate limiter with the configured storage backend."""
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{settings.rate_limit_per_minute}/minute"],
        enabled=settings.rate_limit_enabled,
        storage_uri=settings.rate_limit_storage if settings.rate_limit_enabled else "memory://",
        headers_enabled=True,
    )


def get_route_limiter(settings: Settings) -> RouteRateLimiter | None:
    """Create the limiter for route budgets, or None when rate limiting is off."""
    if not settings.rate_limit_enabled:
        return None
    return RouteRateLimiter(
        settings.rate_limit_storage,
        [
            RouteBudget(
                AUTH_SCOPE,
                parse(settings.rate_limit_auth),
                AUTH_RATE_LIMIT_MESSAGE,
                failures_only=True,
            ),
            RouteBudget(
                PRODUCT_CREATION_SCOPE,
                parse(settings.rate_limit_product_creation),
                PRODUCT_CREATION_RATE_LIMIT_MESSAGE,
            ),
        ],
    )


def rate_limited(scope: str) -> Callable[[Request], AsyncIterator[None]]:
    """Route dependency enforcing the budget named ``scope``.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limited(AUTH_SCOPE))])
    """

    async def enforce(request: Request) -> AsyncIterator[None]:
        limiter: RouteRateLimiter | None = getattr(request.app.state, "route_limiter", None)
        if limiter is None:
            yield
            return

        client = get_client_identifier(request)
        limiter.acquire(scope, client)
        try:
            yield
        except Exception:
            limiter.record_failure(scope, client)
            raise

    return enforce


def _too_many_requests(message: str, retry_after: int) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=ErrorResponse(message=message, retry_after=retry_after).model_dump(
            by_alias=True, exclude_none=True
        ),
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Render a 429 in the uniform error envelope, with rate limit headers."""
    logger.warning(
        "rate_limit_exceeded",
        client_ip=get_client_identifier(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    limiter: Limiter = request.app.state.limiter
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is None:
        return _too_many_requests(RATE_LIMIT_MESSAGE, exc.limit.limit.get_expiry())

    item, identifiers = view_rate_limit
    reset_time, _ = limiter.limiter.get_window_stats(item, *identifiers)
    response = _too_many_requests(RATE_LIMIT_MESSAGE, seconds_until(reset_time))
    return limiter._inject_headers(response, view_rate_limit)


async def route_rate_limit_exceeded_handler(
    request: Request, exc: RouteRateLimitExceeded
) -> Response:
    """Render a spent route budget as a 429 with a Retry-After header."""
    logger.warning(
        "route_rate_limit_exceeded",
        client_ip=get_client_identifier(request),
        path=request.url.path,
        message=exc.message,
        retry_after=exc.retry_after,
    )
    response = _too_many_requests(exc.message, exc.retry_after)
    response.headers["Retry-After"] = str(exc.retry_after)
    return response


def setup_rate_limiting(app: FastAPI, settings: Settings) -> Limiter:
    """Configure rate limiting for the application.

    Clients are identified by their real IP address (from proxy headers).
    """
    limiter = get_limiter(settings)
    app.state.limiter = limiter
    app.state.route_limiter = get_route_limiter(settings)

    handler: RateLimitHandler = rate_limit_exceeded_handler
    app.add_exception_handler(RateLimitExceeded, handler)
    app.add_exception_handler(RouteRateLimitExceeded, route_rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
