"""In-memory blob store adapter.

A dict-backed implementation of StoragePort for tests and local
development. Objects are not persisted across restarts.
"""

from __future__ import annotations

import threading
from typing import Mapping

import structlog

from lambda_service.adapters.outbound.fault_injection import FaultPlan
from lambda_service.domain.errors import InvalidArgumentError, NotFoundError
from lambda_service.domain.value_objects import Blob, require_key


logger = structlog.get_logger(__name__)


class InMemoryStorage:
    """In-memory implementation of StoragePort.

    Attributes:
        bucket_name: Logical bucket the objects belong to.
        faults: Failure plan and call counters for this adapter.
    """

    def __init__(
        self,
        objects: Mapping[str, bytes] | None = None,
        bucket_name: str = "objects",
        allow_empty_objects: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._objects: dict[str, bytes] = {}
        self._allow_empty = allow_empty_objects
        self.bucket_name = bucket_name
        self.faults = FaultPlan()
        for key, content in (objects or {}).items():
            blob = Blob(key, content)
            self._objects[blob.key] = blob.content

    @property
    def allows_empty_objects(self) -> bool:
        return self._allow_empty

    def put_object(self, blob: Blob) -> None:
        self.faults.record("put_object", blob.key)
        require_key(blob.key)
        if not blob.content and not self._allow_empty:
            raise InvalidArgumentError(f"Empty objects are not allowed: {blob.key}")
        with self._lock:
            self._objects[blob.key] = blob.content
        logger.debug("memory_object_put", bucket=self.bucket_name, key=blob.key, size=blob.size)

    def get_object(self, key: str) -> Blob:
        self.faults.record("get_object", key if isinstance(key, str) else "")
        require_key(key)
        with self._lock:
            content = self._objects.get(key)
        if content is None:
            raise NotFoundError(key)
        return Blob(key, content)

    def call_count(self, call: str | None = None) -> int:
        return self.faults.call_count(call)

    def clear(self) -> None:
        with self._lock:
            self._objects.clear()
        self.faults.reset()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._objects

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)
