"""Value objects for the lambda service domain.

Value objects are immutable and have no identity.

Exports:
    Port payloads:
        - Record: Key plus string-to-string mapping (DatabasePort)
        - Blob: Key plus bytes (StoragePort)

    Operations:
        - Operation: A validated request for exactly one port call
        - OperationKind: get_record, put_record, get_object, put_object
        - ContentEncoding: utf-8 / base64 for object content in JSON
"""

from lambda_service.domain.value_objects.operation import (
    ContentEncoding,
    Operation,
    OperationKind,
    encode_content,
    has_operation,
    parse_operation,
)
from lambda_service.domain.value_objects.records import Blob, Record, require_key

__all__ = [
    # Port payloads
    "Record",
    "Blob",
    "require_key",
    # Operations
    "Operation",
    "OperationKind",
    "ContentEncoding",
    "encode_content",
    "has_operation",
    "parse_operation",
]
