"""Request context middleware.

Resolves a trace id and the real client IP once per request, binds them to
the structlog context and exposes them on ``request.state``. The trace id is
echoed back in the ``X-Trace-ID`` response header.
"""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware
from uuid_extension import uuid7


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds ``trace_id`` and ``client_ip`` for the lifetime of a request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        span = trace.get_current_span()
        trace_id = self._extract_trace_id(request, span.get_span_context())
        client_ip = self._extract_client_ip(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            trace_id=trace_id,
            client_ip=client_ip,
            method=request.method,
            path=request.url.path,
        )

        request.state.trace_id = trace_id
        request.state.client_ip = client_ip

        if span.is_recording():
            span.set_attribute("http.client_ip", client_ip)

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response

    def _extract_trace_id(self, request: Request, span_context: trace.SpanContext) -> str:
        """OpenTelemetry trace id, else Cloudflare's CF-Ray, else a fresh UUIDv7."""
        if span_context.is_valid:
            return format(span_context.trace_id, "032x")
        if cf_ray := request.headers.get("CF-Ray"):
            return cf_ray
        return str(uuid7())

    def _extract_client_ip(self, request: Request) -> str:
        """Client IP from proxy headers, falling back to the socket peer."""
        if cf_connecting_ip := request.headers.get("CF-Connecting-IP"):
            return cf_connecting_ip
        if x_forwarded_for := request.headers.get("X-Forwarded-For"):
            # "client, proxy1, proxy2"
            return x_forwarded_for.split(",")[0].strip()
        if x_real_ip := request.headers.get("X-Real-IP"):
            return x_real_ip
        if request.client and request.client.host:
            return request.client.host
        return "unknown"
