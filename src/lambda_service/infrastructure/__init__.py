"""Infrastructure layer - cross-cutting concerns.

The container module is imported directly (not re-exported here) since
it depends on the application and adapter layers.
"""

from lambda_service.infrastructure.config import Config, get_config
from lambda_service.infrastructure.logging import setup_logging, get_logger, invocation_context
from lambda_service.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from lambda_service.infrastructure.tracing import setup_tracing, get_tracer, trace_span, flush_spans

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "invocation_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "flush_spans",
]
