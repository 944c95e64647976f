from __future__ import annotations

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

TRACER_NAME = "cafe94"

_provider: TracerProvider | None = None
logger = logging.getLogger(__name__)


def _attach_exporter(provider: TracerProvider, endpoint: str) -> None:
    try:
        exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    except Exception:
        logger.exception("otel_exporter_setup_failed")
        return
    provider.add_span_processor(BatchSpanProcessor(exporter))


def configure_tracing(
    service_name: str | None = None,
    endpoint: str | None = None,
) -> TracerProvider:
    """Install the process-wide tracer provider once and return it.

    Spans are only exported when an OTLP endpoint is given or set in
    ``OTEL_EXPORTER_OTLP_ENDPOINT``; otherwise they stay in-process.
    """
    global _provider
    if _provider is not None:
        return _provider

    provider = TracerProvider(
        resource=Resource.create(
            {SERVICE_NAME: service_name or os.getenv("OTEL_SERVICE_NAME", "cafe94-core")}
        )
    )
    endpoint = endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        _attach_exporter(provider, endpoint)

    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)
