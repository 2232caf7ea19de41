"""Request and response payloads handled by the RequestProcessor.

Both payloads are created per invocation and discarded once the
response has been produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from lambda_service.domain.errors import ErrorKind, RequestDecodeError


class ResponseStatus(Enum):
    """Outcome of a request."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RequestPayload:
    """Decoded inbound request.

    Attributes:
        message: Optional free-text message to greet back.
        data: Optional JSON value; expected to be an object.
    """

    message: str | None = None
    data: Any | None = None

    @property
    def is_empty(self) -> bool:
        return self.message is None and self.data is None

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> RequestPayload:
        """Build a payload from a decoded JSON object, ignoring unknown fields.

        Raises:
            RequestDecodeError: If `message` is present but not a string.
        """
        message = body.get("message")
        if message is not None and not isinstance(message, str):
            raise RequestDecodeError("message must be a string")
        return cls(message=message, data=body.get("data"))


@dataclass(frozen=True, slots=True)
class ResponsePayload:
    """Structured response returned by the processor.

    `error_kind` is not serialized; shims use it to choose a status code.
    """

    status: ResponseStatus
    message: str
    timestamp: str
    data: Any | None = None
    error_kind: ErrorKind | None = None

    def __post_init__(self) -> None:
        if self.status is ResponseStatus.ERROR and self.data is not None:
            raise ValueError("error responses must not carry data")

    @property
    def is_success(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Serializable form with a fixed key order."""
        return {
            "status": self.status.value,
            "message": self.message,
            "data": self.data,
            "timestamp": self.timestamp,
        }
