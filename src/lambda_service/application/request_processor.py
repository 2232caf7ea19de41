"""Request Processor - the single business-logic authority.

The RequestProcessor validates a decoded request, routes it to at most
one outbound port call and builds a structured response. It owns one
DatabasePort and one StoragePort for its lifetime and never inspects
which concrete adapters it was given.

Usage:
    from lambda_service.application import RequestProcessor
    from lambda_service.adapters.outbound import InMemoryDatabase, InMemoryStorage

    processor = RequestProcessor(InMemoryDatabase(), InMemoryStorage())
    response = processor.handle(RequestPayload(message="Hello"))
    response.message
    # 'Hello from Rust Lambda! Received message: Hello'

Flow of handle():
    1. Reject non-object `data` ("invalid data format"), no port calls
    2. Compose the greeting (with or without a message)
    3. If `data` names an operation, run exactly one port call and
       translate its outcome
    4. Stamp the UTC timestamp and return

handle() is total: every failure becomes an error ResponsePayload.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Mapping

from lambda_service.domain.entities import RequestPayload, ResponsePayload, ResponseStatus
from lambda_service.domain.errors import ErrorKind, PortError
from lambda_service.domain.value_objects import (
    Operation,
    OperationKind,
    encode_content,
    has_operation,
    parse_operation,
)
from lambda_service.infrastructure.logging import get_logger
from lambda_service.infrastructure.metrics import MetricsRegistry, get_metrics
from lambda_service.infrastructure.tracing import trace_span
from lambda_service.ports.outbound import DatabasePort, StoragePort


GREETING_PREFIX = "Hello from Rust Lambda!"
RECEIVED_MESSAGE = f"{GREETING_PREFIX} Received message: "
NO_MESSAGE = f"{GREETING_PREFIX} No message provided"

INVALID_DATA_FORMAT = "invalid data format"

# Error message per failure kind; clients branch on status codes, not these.
ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "resource not found",
    ErrorKind.INVALID_ARGUMENT: "invalid request",
    ErrorKind.STORAGE_UNAVAILABLE: "service temporarily unavailable",
    ErrorKind.UNCLASSIFIED: "internal error",
}

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_json_object(value: Any) -> bool:
    return isinstance(value, Mapping) and all(isinstance(k, str) for k in value)


class RequestProcessor:
    """Orchestrates validation, port calls and response construction.

    Thread Safety:
        The processor holds no mutable state; one instance may serve
        many concurrent requests. Concurrency safety of the ports is the
        adapters' responsibility.

    Retries:
        None. A StorageUnavailable outcome is reported to the caller,
        who may retry with backoff.
    """

    def __init__(
        self,
        database: DatabasePort,
        storage: StoragePort,
        operation_field: str = "operation",
        metrics: MetricsRegistry | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            database: Record store port.
            storage: Blob store port.
            operation_field: Field of `data` that names the operation.
            metrics: Metrics registry (global registry if None).
            clock: Source of the current UTC time.
        """
        self._database = database
        self._storage = storage
        self._operation_field = operation_field
        self._metrics = metrics or get_metrics()
        self._clock = clock or utc_now
        self._logger = get_logger(__name__)

    @property
    def operation_field(self) -> str:
        return self._operation_field

    def handle(self, request: RequestPayload) -> ResponsePayload:
        """Process one request and return its response.

        Args:
            request: Decoded inbound request.

        Returns:
            The response; never raises for a well-formed request.
        """
        start = time.perf_counter()
        label = "empty" if request.is_empty else "greeting"

        with trace_span(
            "request_processor.handle", {"request.has_data": request.data is not None}
        ) as span:
            try:
                label, response = self._dispatch(request, label)
            except Exception:
                self._logger.exception("request_failed_unexpectedly", operation=label)
                response = self._error(ErrorKind.UNCLASSIFIED)
            span.set_attribute("request.operation", label)
            span.set_attribute("response.status", response.status.value)
            if response.error_kind is not None:
                span.set_attribute("response.error_kind", response.error_kind.value)

        self._metrics.requests_total.labels(
            operation=label, status=response.status.value
        ).inc()
        self._metrics.request_latency_seconds.labels(operation=label).observe(
            time.perf_counter() - start
        )
        self._logger.info(
            "request_handled",
            operation=label,
            status=response.status.value,
            error_kind=response.error_kind.value if response.error_kind else None,
        )
        return response

    def _dispatch(self, request: RequestPayload, label: str) -> tuple[str, ResponsePayload]:
        if request.data is not None and not _is_json_object(request.data):
            return label, self._error(ErrorKind.INVALID_ARGUMENT, INVALID_DATA_FORMAT)

        message = self._greeting(request.message)

        if request.data is None or not has_operation(request.data, self._operation_field):
            return label, self._success(message)

        try:
            operation = parse_operation(request.data, self._operation_field)
        except PortError as e:
            self._logger.info("operation_rejected", reason=str(e))
            return "invalid_operation", self._error(e.kind)

        label = operation.kind.value
        try:
            data = self._execute(operation)
        except PortError as e:
            return label, self._error(e.kind)
        except TimeoutError:
            return label, self._error(ErrorKind.STORAGE_UNAVAILABLE)
        except Exception:
            self._logger.exception("port_call_failed_unclassified", operation=label)
            return label, self._error(ErrorKind.UNCLASSIFIED)
        return label, self._success(message, data)

    @staticmethod
    def _greeting(message: str | None) -> str:
        if message is None:
            return NO_MESSAGE
        return RECEIVED_MESSAGE + message

    def _execute(self, operation: Operation) -> dict[str, Any]:
        """Run the single port call an operation maps to."""
        kind = operation.kind
        with self._port_call(kind):
            if kind is OperationKind.GET_RECORD:
                return self._database.get(operation.key).to_dict()

            if kind is OperationKind.PUT_RECORD:
                assert operation.record is not None
                self._database.put(operation.record)
                return operation.record.to_dict()

            if kind is OperationKind.GET_OBJECT:
                blob = self._storage.get_object(operation.key)
            else:
                assert operation.blob is not None
                blob = operation.blob
                self._storage.put_object(blob)

        content, encoding = encode_content(blob.content, operation.encoding)
        return {
            "key": blob.key,
            "content": content,
            "encoding": encoding.value,
            "size": blob.size,
        }

    @contextmanager
    def _port_call(self, kind: OperationKind) -> Iterator[None]:
        """Span, latency and outcome accounting around one port call."""
        port, call = kind.port, kind.value
        outcome = "ok"
        start = time.perf_counter()
        with trace_span(f"port.{port}.{call}", {"port": port, "call": call}):
            try:
                yield
            except PortError as e:
                outcome = e.kind.value
                raise
            except TimeoutError:
                outcome = ErrorKind.STORAGE_UNAVAILABLE.value
                raise
            except Exception:
                outcome = ErrorKind.UNCLASSIFIED.value
                raise
            finally:
                self._metrics.port_calls_total.labels(
                    port=port, call=call, outcome=outcome
                ).inc()
                self._metrics.port_call_latency_seconds.labels(port=port, call=call).observe(
                    time.perf_counter() - start
                )

    def _success(self, message: str, data: Any | None = None) -> ResponsePayload:
        return ResponsePayload(
            status=ResponseStatus.SUCCESS,
            message=message,
            data=data,
            timestamp=self._timestamp(),
        )

    def _error(self, kind: ErrorKind, message: str | None = None) -> ResponsePayload:
        return ResponsePayload(
            status=ResponseStatus.ERROR,
            message=message or ERROR_MESSAGES[kind],
            timestamp=self._timestamp(),
            error_kind=kind,
        )

    def _timestamp(self) -> str:
        return self._clock().astimezone(timezone.utc).isoformat()

