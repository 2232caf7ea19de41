"""Unit tests for the serverless event adapter."""

from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any, Callable

import pytest

from lambda_service.adapters.inbound.lambda_handler import (
    RESPONSE_HEADERS,
    LambdaHandler,
    decode_event,
    encode_response,
    http_method,
    status_code_for,
)
from lambda_service.adapters.outbound import InMemoryDatabase, InMemoryStorage
from lambda_service.application import RequestProcessor
from lambda_service.domain.entities import RequestPayload, ResponsePayload, ResponseStatus
from lambda_service.domain.errors import ErrorKind, RequestDecodeError
from lambda_service.infrastructure.metrics import MetricsRegistry


def _post(body: Any, **extra: Any) -> dict[str, Any]:
    event = {"httpMethod": "POST", "path": "/", "body": body}
    event.update(extra)
    return event


@pytest.fixture
def lambda_handler(
    database: InMemoryDatabase,
    storage: InMemoryStorage,
    metrics_registry: MetricsRegistry,
    fixed_clock: Callable[[], datetime],
) -> LambdaHandler:
    processor = RequestProcessor(database, storage, metrics=metrics_registry, clock=fixed_clock)
    return LambdaHandler(processor, metrics=metrics_registry, clock=fixed_clock)


@pytest.mark.unit
class TestDecodeEvent:
    """Tests for decode_event."""

    def test_json_body(self) -> None:
        request = decode_event(_post('{"message": "hi", "data": {"a": 1}}'))

        assert request == RequestPayload(message="hi", data={"a": 1})

    def test_direct_invocation(self) -> None:
        assert decode_event({"message": "test"}) == RequestPayload(message="test")

    def test_empty_direct_invocation(self) -> None:
        assert decode_event({}).is_empty

    @pytest.mark.parametrize("body", [None, "", "   \n"])
    def test_missing_body_is_empty_request(self, body: str | None) -> None:
        assert decode_event(_post(body)).is_empty

    def test_health_check_ignores_body(self) -> None:
        event = {
            "httpMethod": "GET",
            "queryStringParameters": {"health": "TRUE"},
            "body": "not json",
        }
        assert decode_event(event).is_empty

    def test_health_param_on_post_is_not_health_check(self) -> None:
        event = _post("not json", queryStringParameters={"health": "true"})
        with pytest.raises(RequestDecodeError):
            decode_event(event)

    def test_base64_body(self) -> None:
        encoded = base64.b64encode(b'{"message": "encoded"}').decode("ascii")

        request = decode_event(_post(encoded, isBase64Encoded=True))

        assert request.message == "encoded"

    def test_binary_body_rejected(self) -> None:
        encoded = base64.b64encode(b"\xff\xfe\x00").decode("ascii")
        with pytest.raises(RequestDecodeError, match="Binary body not supported"):
            decode_event(_post(encoded, isBase64Encoded=True))

    def test_invalid_json(self) -> None:
        with pytest.raises(RequestDecodeError, match="Invalid JSON"):
            decode_event(_post("{not json"))

    @pytest.mark.parametrize("body", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_body(self, body: str) -> None:
        with pytest.raises(RequestDecodeError, match="must be a JSON object"):
            decode_event(_post(body))

    def test_non_string_message(self) -> None:
        with pytest.raises(RequestDecodeError):
            decode_event(_post('{"message": 5}'))

    def test_http_api_method(self) -> None:
        event = {"requestContext": {"http": {"method": "post"}}, "rawPath": "/"}
        assert http_method(event) == "POST"


@pytest.mark.unit
class TestEncodeResponse:
    """Tests for status mapping and response encoding."""

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (ErrorKind.INVALID_ARGUMENT, 400),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.STORAGE_UNAVAILABLE, 503),
            (ErrorKind.UNCLASSIFIED, 500),
        ],
    )
    def test_error_status_codes(self, kind: ErrorKind, expected: int) -> None:
        response = ResponsePayload(
            status=ResponseStatus.ERROR, message="x", timestamp="t", error_kind=kind
        )
        assert status_code_for(response) == expected

    def test_error_without_kind_is_500(self) -> None:
        response = ResponsePayload(status=ResponseStatus.ERROR, message="x", timestamp="t")
        assert status_code_for(response) == 500

    def test_success_encoding(self) -> None:
        response = ResponsePayload(
            status=ResponseStatus.SUCCESS, message="ok", timestamp="t", data={"k": "v"}
        )

        result = encode_response(response)

        assert result["statusCode"] == 200
        assert result["headers"] == RESPONSE_HEADERS
        assert result["headers"] is not RESPONSE_HEADERS
        assert json.loads(result["body"]) == {
            "status": "success",
            "message": "ok",
            "data": {"k": "v"},
            "timestamp": "t",
        }


@pytest.mark.unit
class TestLambdaHandler:
    """End-to-end behaviour of the shim over in-memory ports."""

    def test_message_round_trip(self, lambda_handler: LambdaHandler) -> None:
        result = lambda_handler(_post('{"message": "Hello from test!"}'))

        assert result["statusCode"] == 200
        assert result["headers"]["Access-Control-Allow-Origin"] == "*"
        assert json.loads(result["body"]) == {
            "status": "success",
            "message": "Hello from Rust Lambda! Received message: Hello from test!",
            "data": None,
            "timestamp": "2024-01-02T03:04:05+00:00",
        }

    def test_health_check(self, lambda_handler: LambdaHandler) -> None:
        result = lambda_handler({"httpMethod": "GET", "queryStringParameters": {"health": "true"}})

        body = json.loads(result["body"])
        assert result["statusCode"] == 200
        assert body["message"] == "Hello from Rust Lambda! No message provided"

    def test_decode_error(
        self, lambda_handler: LambdaHandler, metrics_registry: MetricsRegistry
    ) -> None:
        result = lambda_handler(_post("{broken"))

        body = json.loads(result["body"])
        assert result["statusCode"] == 400
        assert body["status"] == "error"
        assert body["message"] == "Invalid JSON in request body"
        assert body["data"] is None
        assert metrics_registry.registry.get_sample_value("lambda_decode_errors_total") == 1.0

    def test_invalid_data_format(self, lambda_handler: LambdaHandler) -> None:
        result = lambda_handler(_post('{"message": "x", "data": [1, 2]}'))

        assert result["statusCode"] == 400
        assert json.loads(result["body"])["message"] == "invalid data format"

    def test_put_then_get_record(self, lambda_handler: LambdaHandler) -> None:
        put = {"data": {"operation": "put_record", "key": "u1", "value": {"name": "Bob"}}}
        get = {"data": {"operation": "get_record", "key": "u1"}}

        assert lambda_handler(_post(json.dumps(put)))["statusCode"] == 200
        result = lambda_handler(_post(json.dumps(get)))

        assert json.loads(result["body"])["data"] == {"key": "u1", "value": {"name": "Bob"}}

    def test_missing_object_is_404(self, lambda_handler: LambdaHandler) -> None:
        result = lambda_handler(_post('{"data": {"operation": "get_object", "key": "nope"}}'))

        assert result["statusCode"] == 404
        assert json.loads(result["body"])["message"] == "resource not found"

    def test_direct_invocation(self, lambda_handler: LambdaHandler) -> None:
        result = lambda_handler({"message": "test"})

        assert result["statusCode"] == 200
        assert "test" in json.loads(result["body"])["message"]

    def test_context_request_id_is_accepted(self, lambda_handler: LambdaHandler) -> None:
        class _Context:
            aws_request_id = "req-123"

        result = lambda_handler({"message": "ctx"}, _Context())

        assert result["statusCode"] == 200


class _KindlessErrorProcessor:
    """A request handler whose error responses carry no error kind."""

    def handle(self, request: RequestPayload) -> ResponsePayload:
        return ResponsePayload(status=ResponseStatus.ERROR, message="failed", timestamp="t")


@pytest.mark.unit
class TestRejectedEvents:
    """Events the shim answers itself, without reaching the processor."""

    @pytest.mark.parametrize("event", [["x"], "hello", 42, None])
    def test_non_object_direct_invocation(
        self,
        lambda_handler: LambdaHandler,
        metrics_registry: MetricsRegistry,
        event: Any,
    ) -> None:
        result = lambda_handler(event)

        body = json.loads(result["body"])
        assert result["statusCode"] == 400
        assert body["message"] == "Request body must be a JSON object"
        assert body["timestamp"] == "2024-01-02T03:04:05+00:00"
        assert metrics_registry.registry.get_sample_value("lambda_decode_errors_total") == 1.0

    def test_decode_event_rejects_non_mapping(self) -> None:
        with pytest.raises(RequestDecodeError, match="must be a JSON object"):
            decode_event([{"message": "hi"}])

    def test_deeply_nested_body(self, lambda_handler: LambdaHandler) -> None:
        depth = 100_000
        body = '{"data": ' + "[" * depth + "]" * depth + "}"

        result = lambda_handler(_post(body))

        assert result["statusCode"] == 400
        assert json.loads(result["body"])["message"] == "Invalid JSON in request body"

    def test_error_without_kind_is_never_200(self, metrics_registry: MetricsRegistry) -> None:
        shim = LambdaHandler(_KindlessErrorProcessor(), metrics=metrics_registry)

        result = shim({"message": "hi"})

        assert result["statusCode"] == 500
        assert json.loads(result["body"])["status"] == "error"
