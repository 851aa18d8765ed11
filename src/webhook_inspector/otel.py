"""OpenTelemetry instrumentation.

Activated only when ``otel_exporter_endpoint`` is set in settings. Call
:func:`setup_otel` before the aiohttp application is constructed so the
server instrumentation wraps it.
"""
from __future__ import annotations

import structlog
from aiohttp import web

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.aiohttp_server import AioHttpServerInstrumentor

from webhook_inspector.settings import Settings

logger = structlog.get_logger(__name__)

OTEL_PROVIDER_KEY = web.AppKey("otel_tracer_provider", TracerProvider)


def setup_otel(settings: Settings) -> TracerProvider | None:
    """Install a tracer provider with an OTLP HTTP exporter, or return ``None`` when disabled."""
    endpoint = settings.otel_exporter_endpoint
    if not endpoint:
        logger.info("otel_exporter_endpoint not set, OpenTelemetry tracing disabled")
        return None

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: settings.app_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{str(endpoint).rstrip('/')}/v1/traces"))
    )
    trace.set_tracer_provider(provider)

    # Adds a span per request
    AioHttpServerInstrumentor().instrument()

    logger.info("OpenTelemetry tracing enabled", endpoint=str(endpoint), service=settings.app_name)
    return provider


async def shutdown_otel(app: web.Application) -> None:
    """Flush pending spans on application shutdown."""
    provider = app.get(OTEL_PROVIDER_KEY)
    if provider is not None:
        provider.shutdown()
        logger.info("OpenTelemetry tracer provider shut down")
