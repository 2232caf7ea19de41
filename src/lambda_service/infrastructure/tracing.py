"""OpenTelemetry tracing for request handling.

Spans are exported in batches. A serverless runtime may freeze the
process between invocations, so the entry point calls `flush_spans`
after every event to push out whatever the batch processors still hold.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from lambda_service import __version__


_provider: TracerProvider | None = None
_tracer: trace.Tracer | None = None


def _exporters(otlp_endpoint: str | None, console_export: bool) -> list[SpanExporter]:
    exporters: list[SpanExporter] = []
    if otlp_endpoint:
        exporters.append(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    if console_export:
        exporters.append(ConsoleSpanExporter())
    return exporters


def setup_tracing(
    service_name: str = "lambda_service",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider for this process.

    Args:
        service_name: Service and function name reported on every span
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317")
        console_export: Also print finished spans to stdout

    Returns:
        The tracer used by `trace_span`
    """
    global _provider, _tracer

    provider = TracerProvider(
        resource=Resource.create(
            {
                SERVICE_NAME: service_name,
                SERVICE_VERSION: __version__,
                "faas.name": service_name,
            }
        )
    )
    for exporter in _exporters(otlp_endpoint, console_export):
        provider.add_span_processor(BatchSpanProcessor(exporter))

    # The global provider can only be set once per process; spans from
    # trace_span always go through the provider built here.
    trace.set_tracer_provider(provider)
    _provider = provider
    _tracer = provider.get_tracer(service_name, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the service tracer (a no-op tracer before setup_tracing)."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("lambda_service")
    return _tracer


def flush_spans(timeout_millis: int = 1000) -> bool:
    """Export buffered spans. Returns False if the flush timed out."""
    if _provider is None:
        return True
    return _provider.force_flush(timeout_millis)


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Iterator[trace.Span]:
    """
    Run a block inside a new current span.

    Attributes whose value is None are left off. An exception leaving
    the block is recorded on the span and re-raised.
    """
    clean = {key: value for key, value in (attributes or {}).items() if value is not None}
    with get_tracer().start_as_current_span(name, attributes=clean) as span:
        yield span
