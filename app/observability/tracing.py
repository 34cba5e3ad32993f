from __future__ import annotations

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from app.config import Settings


TRACER_NAME = "roman-numeral-service"

_PROVIDER: TracerProvider | None = None


def build_tracer_provider(settings: Settings, exporter: SpanExporter | None = None) -> TracerProvider:
    """Create a provider tagged with service attributes.

    Without an explicit exporter, spans are batched to the OTLP/HTTP endpoint.
    An explicit exporter gets a synchronous processor so spans are visible as
    soon as they end.
    """

    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": settings.service_version,
            "deployment.environment": settings.app_env,
        }
    )
    provider = TracerProvider(resource=resource)
    if exporter is None:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)))
    else:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider


def set_tracer_provider(provider: TracerProvider | None) -> None:
    """Route get_tracer() to a specific provider (None falls back to the global one)."""

    global _PROVIDER
    _PROVIDER = provider


def get_tracer() -> trace.Tracer:
    if _PROVIDER is not None:
        return _PROVIDER.get_tracer(TRACER_NAME)
    return trace.get_tracer(TRACER_NAME)


def start_tracing(settings: Settings) -> None:
    logger = structlog.get_logger("tracing")
    try:
        provider = build_tracer_provider(settings)
        trace.set_tracer_provider(provider)
        set_tracer_provider(provider)
    except Exception:
        logger.exception("tracing_init_failed")
        return

    logger.info(
        "tracing_initialized",
        endpoint=settings.otel_exporter_otlp_endpoint,
        service_name=settings.otel_service_name,
    )


def shutdown_tracing() -> None:
    if _PROVIDER is None:
        return

    logger = structlog.get_logger("tracing")
    try:
        _PROVIDER.shutdown()
    except Exception:
        logger.exception("tracing_shutdown_failed")
        return
    finally:
        set_tracer_provider(None)

    logger.info("tracing_shutdown_completed")
