"""Serverless event adapter (transport shim).

Decodes an API-Gateway-style proxy event into a RequestPayload, runs it
through a RequestHandlerPort and encodes the ResponsePayload back into
an HTTP-shaped response dict. The processor never sees the method,
path or headers.

Event shape (fields read):
    httpMethod / requestContext.http.method
    path / rawPath
    queryStringParameters
    body, isBase64Encoded

An event with none of these keys is a direct invocation and is treated
as the JSON body itself, e.g. ``{"message": "test"}``.

Status codes:
    success             -> 200
    invalid argument    -> 400
    not found           -> 404
    storage unavailable -> 503
    anything else       -> 500

Usage:
    handler = LambdaHandler(processor)
    result = handler({"httpMethod": "POST", "body": '{"message": "hi"}'})
    result["statusCode"]
    # 200
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Callable, Mapping

from lambda_service.application import RequestProcessor, utc_now
from lambda_service.domain.entities import RequestPayload, ResponsePayload, ResponseStatus
from lambda_service.domain.errors import ErrorKind, RequestDecodeError
from lambda_service.infrastructure.config import get_config
from lambda_service.infrastructure.container import get_container
from lambda_service.infrastructure.logging import get_logger, invocation_context, setup_logging
from lambda_service.infrastructure.metrics import MetricsRegistry, get_metrics
from lambda_service.infrastructure.tracing import flush_spans, setup_tracing
from lambda_service.ports.inbound import RequestHandlerPort


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
    ErrorKind.UNCLASSIFIED: 500,
}

RESPONSE_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

_PROXY_KEYS = ("httpMethod", "requestContext", "body", "queryStringParameters", "rawPath")


def status_code_for(response: ResponsePayload) -> int:
    """Wire status code for a response.

    An error response without a kind is treated as unclassified.
    """
    if response.status is ResponseStatus.SUCCESS:
        return 200
    return STATUS_CODES.get(response.error_kind, 500)


def http_method(event: Mapping[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        method = (event.get("requestContext") or {}).get("http", {}).get("method")
    return str(method or "GET").upper()


def _is_health_check(event: Mapping[str, Any]) -> bool:
    query = event.get("queryStringParameters") or {}
    return http_method(event) == "GET" and str(query.get("health", "")).lower() == "true"


def _body_text(event: Mapping[str, Any]) -> str | None:
    body = event.get("body")
    if body is None or body == "":
        return None
    if not isinstance(body, str):
        raise RequestDecodeError("Request body must be text")
    if not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        raise RequestDecodeError("Binary body not supported") from None


def decode_event(event: Any) -> RequestPayload:
    """Turn an inbound event into a RequestPayload.

    Raises:
        RequestDecodeError: If the event or its body is not a UTF-8 JSON object.
    """
    if not isinstance(event, Mapping):
        raise RequestDecodeError("Request body must be a JSON object")
    if not any(key in event for key in _PROXY_KEYS):
        return RequestPayload.from_dict(event)

    if _is_health_check(event):
        return RequestPayload()

    text = _body_text(event)
    if text is None or not text.strip():
        return RequestPayload()

    try:
        body = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        raise RequestDecodeError("Invalid JSON in request body") from None
    if not isinstance(body, dict):
        raise RequestDecodeError("Request body must be a JSON object")
    return RequestPayload.from_dict(body)


def encode_response(response: ResponsePayload) -> dict[str, Any]:
    """Turn a ResponsePayload into an HTTP-shaped response dict."""
    return {
        "statusCode": status_code_for(response),
        "headers": dict(RESPONSE_HEADERS),
        "body": json.dumps(response.to_dict()),
    }


class LambdaHandler:
    """Callable serverless handler bound to one request processor."""

    def __init__(
        self,
        processor: RequestHandlerPort,
        metrics: MetricsRegistry | None = None,
        clock: Callable[[], Any] | None = None,
    ) -> None:
        """Bind the handler to a processor.

        Args:
            processor: Handles every decoded request.
            metrics: Registry for decode-error counts (global registry if None).
            clock: Stamps responses for events rejected before they reach
                the processor. The processor stamps its own responses.
        """
        self._processor = processor
        self._metrics = metrics or get_metrics()
        self._clock = clock or utc_now
        self._logger = get_logger(__name__)

    def __call__(self, event: Any, context: Any = None) -> dict[str, Any]:
        fields = event if isinstance(event, Mapping) else {}
        with invocation_context(
            http_method=http_method(fields),
            path=fields.get("path") or fields.get("rawPath"),
            request_id=getattr(context, "aws_request_id", None),
        ):
            try:
                request = decode_event(event)
            except RequestDecodeError as e:
                self._metrics.decode_errors_total.inc()
                self._logger.warning("request_decode_failed", reason=str(e))
                return encode_response(self._decode_error(str(e)))

            return encode_response(self._processor.handle(request))

    def _decode_error(self, message: str) -> ResponsePayload:
        return ResponsePayload(
            status=ResponseStatus.ERROR,
            message=message,
            timestamp=self._clock().isoformat(),
            error_kind=ErrorKind.INVALID_ARGUMENT,
        )


_handler: LambdaHandler | None = None


def handler(event: Any, context: Any = None) -> dict[str, Any]:
    """Serverless entry point.

    Configuration, logging, tracing and the adapters are set up on the
    first invocation and reused by later (warm) invocations.
    """
    global _handler
    if _handler is None:
        config = get_config()
        setup_logging(config.observability.log_level, config.observability.log_format)
        setup_tracing(
            service_name=config.observability.otel_service_name,
            otlp_endpoint=config.observability.otel_endpoint,
        )
        _handler = LambdaHandler(get_container().resolve(RequestProcessor))
    try:
        return _handler(event, context)
    finally:
        flush_spans()
