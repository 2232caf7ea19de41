"""Mapping from a request's `data` object to a single port operation.

A request selects an operation by naming it in a configurable field of
its `data` object (``"operation"`` by default)::

    {"operation": "put_record", "key": "user-1", "value": {"name": "Alice"}}
    {"operation": "get_record", "key": "user-1"}
    {"operation": "put_object", "key": "a.txt", "content": "aGk=", "encoding": "base64"}
    {"operation": "get_object", "key": "a.txt"}

Parsing happens before any port call, so a malformed operation never
causes a side effect.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from lambda_service.domain.errors import InvalidArgumentError
from lambda_service.domain.value_objects.records import Blob, Record, require_key


class OperationKind(Enum):
    """Operations a request can route to."""

    GET_RECORD = "get_record"
    PUT_RECORD = "put_record"
    GET_OBJECT = "get_object"
    PUT_OBJECT = "put_object"

    @property
    def port(self) -> str:
        """Name of the port the operation is served by."""
        if self in (OperationKind.GET_RECORD, OperationKind.PUT_RECORD):
            return "database"
        return "storage"


class ContentEncoding(Enum):
    """How object content is carried inside JSON."""

    UTF8 = "utf-8"
    BASE64 = "base64"


@dataclass(frozen=True, slots=True)
class Operation:
    """A parsed, validated request for exactly one port call.

    Attributes:
        kind: Which operation to run.
        key: Target key (non-empty).
        record: Record to write (PUT_RECORD only).
        blob: Blob to write (PUT_OBJECT only).
        encoding: Content encoding used for object payloads.
    """

    kind: OperationKind
    key: str
    record: Record | None = None
    blob: Blob | None = None
    encoding: ContentEncoding = ContentEncoding.UTF8


def _parse_encoding(value: Any) -> ContentEncoding:
    if value is None:
        return ContentEncoding.UTF8
    try:
        return ContentEncoding(value)
    except ValueError:
        raise InvalidArgumentError(f"Unsupported encoding: {value!r}") from None


def _decode_content(content: Any, encoding: ContentEncoding) -> bytes:
    if not isinstance(content, str):
        raise InvalidArgumentError("content must be a string")
    if encoding is ContentEncoding.BASE64:
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidArgumentError("content is not valid base64") from None
    return content.encode("utf-8")


def encode_content(content: bytes, preferred: ContentEncoding) -> tuple[str, ContentEncoding]:
    """Render bytes for a JSON response.

    Falls back to base64 when UTF-8 is requested but the bytes are not
    valid UTF-8.
    """
    if preferred is ContentEncoding.UTF8:
        try:
            return content.decode("utf-8"), ContentEncoding.UTF8
        except UnicodeDecodeError:
            pass
    return base64.b64encode(content).decode("ascii"), ContentEncoding.BASE64


def has_operation(data: Mapping[str, Any], operation_field: str) -> bool:
    """Whether a data object asks for a port operation."""
    return operation_field in data


def parse_operation(data: Mapping[str, Any], operation_field: str = "operation") -> Operation:
    """Build an Operation from a request's data object.

    Args:
        data: The request's data object.
        operation_field: Name of the field holding the operation name.

    Returns:
        The parsed operation.

    Raises:
        InvalidArgumentError: If the operation name is unknown or its
            arguments are missing or malformed.
    """
    name = data.get(operation_field)
    try:
        kind = OperationKind(name)
    except ValueError:
        raise InvalidArgumentError(f"Unknown operation: {name!r}") from None

    key = require_key(data.get("key"))

    if kind is OperationKind.PUT_RECORD:
        value = data.get("value")
        if not isinstance(value, Mapping):
            raise InvalidArgumentError("put_record requires an object 'value'")
        return Operation(kind=kind, key=key, record=Record(key, value))

    if kind is OperationKind.PUT_OBJECT:
        encoding = _parse_encoding(data.get("encoding"))
        content = _decode_content(data.get("content"), encoding)
        return Operation(kind=kind, key=key, blob=Blob(key, content), encoding=encoding)

    if kind is OperationKind.GET_OBJECT:
        return Operation(kind=kind, key=key, encoding=_parse_encoding(data.get("encoding")))

    return Operation(kind=kind, key=key)
