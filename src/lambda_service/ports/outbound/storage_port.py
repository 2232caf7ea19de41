"""Storage port for blob access.

This outbound port defines the contract for an object/blob store
addressed by key.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from lambda_service.domain.value_objects import Blob


@runtime_checkable
class StoragePort(Protocol):
    """Protocol for blob puts and gets.

    Thread Safety:
        Implementations must be safe for concurrent use.

    Empty objects:
        Whether empty content is accepted is declared by the adapter
        through `allows_empty_objects`. An adapter that disallows them
        raises InvalidArgumentError from put_object.
    """

    @property
    @abstractmethod
    def allows_empty_objects(self) -> bool:
        """Whether zero-length blobs can be stored."""
        ...

    @abstractmethod
    def put_object(self, blob: Blob) -> None:
        """Store a blob, replacing any prior content for its key.

        Args:
            blob: Blob to store.

        Raises:
            InvalidArgumentError: If blob.key is empty, or the content is
                empty and the adapter disallows empty objects.
            StorageUnavailableError: On any adapter-level I/O failure.
        """
        ...

    @abstractmethod
    def get_object(self, key: str) -> Blob:
        """Fetch the blob stored under a key.

        Args:
            key: Object key (non-empty).

        Returns:
            The stored blob.

        Raises:
            InvalidArgumentError: If key is empty.
            NotFoundError: If no object exists for key.
            StorageUnavailableError: On any adapter-level I/O failure.
        """
        ...
