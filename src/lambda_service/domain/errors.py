"""Error taxonomy shared by the ports, the processor and the shims.

Ports raise PortError subclasses. The processor converts every one of
them into an error ResponsePayload tagged with its ErrorKind, and the
transport shims map the ErrorKind to a wire-level status code.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Classification of a failure as seen by the caller."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    UNCLASSIFIED = "unclassified"

    @property
    def retryable(self) -> bool:
        """Only transient storage failures are safe to retry."""
        return self is ErrorKind.STORAGE_UNAVAILABLE


class PortError(Exception):
    """Base class for failures raised by a port implementation."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class InvalidArgumentError(PortError):
    """Raised when the caller supplied malformed input (e.g. an empty key)."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(PortError):
    """Raised when no record or object exists for a key."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(f"No entry for key: {key}")
        self.key = key


class StorageUnavailableError(PortError):
    """Raised on adapter-level I/O failure, timeout or cancellation."""

    kind = ErrorKind.STORAGE_UNAVAILABLE


class RequestDecodeError(Exception):
    """Raised by a transport shim when an inbound body cannot be decoded."""


class ConfigurationError(Exception):
    """Raised when the composition root is given an unusable configuration."""
