"""REST API adapter for local development.

Wraps the serverless shim in a FastAPI application so the handler can be
exercised over HTTP without a serverless runtime. Every request outside
the system endpoints is turned into a proxy event and passed through
exactly the same decode/handle/encode path as in production.

Endpoints:
    GET  /health  - Liveness check
    GET  /metrics - Prometheus exposition
    ANY  /{path}  - Proxied to the LambdaHandler

Usage:
    from lambda_service.adapters.inbound.rest_api import create_app
    from lambda_service.infrastructure.container import get_container

    app = create_app(LambdaHandler(get_container().resolve(RequestProcessor)))
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 9000
"""

from __future__ import annotations

import base64

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from lambda_service import __version__
from lambda_service.adapters.inbound.lambda_handler import LambdaHandler
from lambda_service.application import RequestProcessor
from lambda_service.infrastructure.config import get_config
from lambda_service.infrastructure.container import get_container
from lambda_service.infrastructure.logging import setup_logging
from lambda_service.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from lambda_service.infrastructure.tracing import setup_tracing


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Service version")


async def request_to_event(request: Request) -> dict:
    """Build a proxy event from an incoming HTTP request."""
    raw = await request.body()
    try:
        body: str | None = raw.decode("utf-8") if raw else None
        is_base64 = False
    except UnicodeDecodeError:
        body = base64.b64encode(raw).decode("ascii")
        is_base64 = True

    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "queryStringParameters": dict(request.query_params) or None,
        "headers": dict(request.headers),
        "body": body,
        "isBase64Encoded": is_base64,
    }


def create_app(handler: LambdaHandler, metrics: MetricsRegistry | None = None) -> FastAPI:
    """Create a FastAPI application around a serverless handler.

    Args:
        handler: The handler every proxied request is passed to.
        metrics: Registry exposed at /metrics (global registry if None).

    Returns:
        A configured FastAPI application.
    """
    metrics = metrics or get_metrics()

    app = FastAPI(
        title="Lambda Service API",
        description="Local HTTP front for the serverless request processor",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get("/metrics", tags=["System"])
    async def prometheus_metrics() -> Response:
        """Prometheus metrics in text exposition format."""
        return Response(generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "DELETE"],
        tags=["Handler"],
    )
    async def invoke(request: Request) -> Response:
        """Run the request through the serverless handler."""
        event = await request_to_event(request)
        result = await run_in_threadpool(handler, event)
        headers = {k: v for k, v in result["headers"].items() if k.lower() != "content-type"}
        return Response(
            content=result["body"],
            status_code=result["statusCode"],
            headers=headers,
            media_type=result["headers"].get("Content-Type", "application/json"),
        )

    return app


def run_server(
    handler: LambdaHandler,
    host: str = "0.0.0.0",
    port: int = 9000,
) -> None:
    """Run the REST API server.

    Args:
        handler: The serverless handler to front.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(handler)
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    """Run the local server with logging, metrics and tracing from config."""
    config = get_config()
    setup_logging(config.observability.log_level, config.observability.log_format)
    setup_metrics(config.server.metrics_port)
    setup_tracing(
        service_name=config.observability.otel_service_name,
        otlp_endpoint=config.observability.otel_endpoint,
    )
    run_server(
        LambdaHandler(get_container().resolve(RequestProcessor)),
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
