"""OpenTelemetry tracing for the API, its database and its outbound HTTP calls."""

from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio

from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging.config import get_logger
from storefront.utils.sanitizer import SENSITIVE_PATTERNS, sanitize_value


logger = get_logger(__name__)


class SanitizingSpanProcessor(SpanProcessor):
    """Redacts sensitive span attributes (auth headers, bodies, SQL) before export.

    Must be registered ahead of the exporting processor.
    """

    def on_start(self, span: Span, parent_context: Context | None = None) -> None:
        pass

    def on_end(self, span: ReadableSpan) -> None:
        if not span.attributes:
            return
        sanitized = {
            key: sanitize_value(key, value, SENSITIVE_PATTERNS, show_length=True)
            for key, value in span.attributes.items()
        }
        # ReadableSpan has no public setter for attributes
        if hasattr(span, "_attributes"):
            span._attributes = sanitized

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


def configure_opentelemetry(settings: Settings) -> None:
    """Install the global tracer provider and instrument httpx.

    No-op unless ``OTEL_ENABLED`` is set.
    """
    if not settings.otel_enabled:
        return

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": settings.app_version,
            "deployment.environment": settings.app_env,
        }
    )
    provider = TracerProvider(
        resource=resource,
        sampler=ParentBasedTraceIdRatio(settings.otel_trace_sample_rate),
    )
    provider.add_span_processor(SanitizingSpanProcessor())
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=settings.otel_exporter_otlp_endpoint,
                insecure=settings.otel_exporter_otlp_insecure,
            )
        )
    )
    trace.set_tracer_provider(provider)

    # Propagates W3C trace context on image uploads
    HTTPXClientInstrumentor().instrument()
    logger.info("opentelemetry_configured", endpoint=settings.otel_exporter_otlp_endpoint)


def instrument_fastapi(app: Any) -> None:
    """Instrument FastAPI application with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy(engine: Any) -> None:
    """Instrument an async SQLAlchemy engine with OpenTelemetry."""
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, enable_commenter=True)
