"""Database port for key-based record access.

This outbound port defines the contract for a key/value record store.
Implementations may back it with an in-memory map, local files or a
managed key/value service.

References:
    - domain/errors.py (failure taxonomy)
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from lambda_service.domain.value_objects import Record


@runtime_checkable
class DatabasePort(Protocol):
    """Protocol for record reads and writes.

    Thread Safety:
        Implementations must be safe for concurrent use by multiple
        in-flight requests.

    Cancellation:
        A timed-out or cancelled call must raise StorageUnavailableError
        rather than hang.
    """

    @abstractmethod
    def get(self, key: str) -> Record:
        """Read the record stored under a key.

        Args:
            key: Record key (non-empty).

        Returns:
            The stored record.

        Raises:
            InvalidArgumentError: If key is empty.
            NotFoundError: If no record exists for key.
            StorageUnavailableError: On any adapter-level I/O failure.
        """
        ...

    @abstractmethod
    def put(self, record: Record) -> None:
        """Write a record, replacing any prior value for its key.

        The write is all-or-nothing: readers never observe a partial
        record.

        Args:
            record: Record to store.

        Raises:
            InvalidArgumentError: If record.key is empty.
            StorageUnavailableError: On any adapter-level I/O failure.
        """
        ...
