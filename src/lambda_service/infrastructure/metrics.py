"""Prometheus metrics for the request processor and its ports."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all lambda service metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or REGISTRY

        # Request metrics
        self.requests_total = Counter(
            "lambda_requests_total",
            "Total number of handled requests",
            ["operation", "status"],  # operation: greeting, empty, get_record, ...
            registry=self._registry,
        )

        self.request_latency_seconds = Histogram(
            "lambda_request_latency_seconds",
            "End-to-end handle() latency in seconds",
            ["operation"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        # Port metrics
        self.port_calls_total = Counter(
            "lambda_port_calls_total",
            "Total number of outbound port calls",
            ["port", "call", "outcome"],  # outcome: ok or an ErrorKind value
            registry=self._registry,
        )

        self.port_call_latency_seconds = Histogram(
            "lambda_port_call_latency_seconds",
            "Outbound port call latency in seconds",
            ["port", "call"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        # Decode failures at the transport shim
        self.decode_errors_total = Counter(
            "lambda_decode_errors_total",
            "Inbound events rejected before reaching the processor",
            registry=self._registry,
        )

        self.info = Info(
            "lambda_service",
            "Lambda service information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry these metrics are registered in."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8009, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    if _metrics is None or registry is not None:
        _metrics = MetricsRegistry(registry)

    from lambda_service import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
