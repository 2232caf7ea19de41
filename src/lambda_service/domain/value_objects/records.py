"""Value types exchanged across the outbound ports.

A Record travels through the DatabasePort, a Blob through the
StoragePort. Both are immutable and live only for the single port
call that produced or consumed them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from lambda_service.domain.errors import InvalidArgumentError


def require_key(key: object) -> str:
    """Return key if it is a non-empty string, else raise InvalidArgumentError."""
    if not isinstance(key, str) or not key:
        raise InvalidArgumentError("key must be a non-empty string")
    return key


@dataclass(frozen=True, slots=True)
class Record:
    """Database record: a key and a flat string-to-string mapping.

    Attributes:
        key: Record key (non-empty).
        value: Attribute map; both names and values are strings.

    Example:
        >>> Record("user-1", {"name": "Alice"}).value["name"]
        'Alice'
    """

    key: str
    value: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the record and freeze a private copy of the value."""
        require_key(self.key)
        if not isinstance(self.value, Mapping):
            raise InvalidArgumentError("record value must be a mapping")
        for name, item in self.value.items():
            if not isinstance(name, str) or not isinstance(item, str):
                raise InvalidArgumentError("record value must map strings to strings")
        object.__setattr__(self, "value", dict(self.value))

    def to_dict(self) -> dict[str, object]:
        return {"key": self.key, "value": dict(self.value)}


@dataclass(frozen=True, slots=True)
class Blob:
    """Storage object: a key and its raw bytes."""

    key: str
    content: bytes = b""

    def __post_init__(self) -> None:
        require_key(self.key)
        if not isinstance(self.content, (bytes, bytearray)):
            raise InvalidArgumentError("blob content must be bytes")
        object.__setattr__(self, "content", bytes(self.content))

    @property
    def size(self) -> int:
        return len(self.content)
