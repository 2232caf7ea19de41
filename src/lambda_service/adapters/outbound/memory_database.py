"""In-memory record store adapter.

A dict-backed implementation of DatabasePort for tests and local
development. Records are not persisted across restarts.

Usage:
    db = InMemoryDatabase()
    db.put(Record("user-1", {"name": "Alice"}))
    record = db.get("user-1")

    # Drive failure paths
    db.faults.fail_on("get", key="user-2", kind=ErrorKind.NOT_FOUND)
"""

from __future__ import annotations

import threading
from typing import Mapping

import structlog

from lambda_service.adapters.outbound.fault_injection import FaultPlan
from lambda_service.domain.errors import NotFoundError
from lambda_service.domain.value_objects import Record, require_key


logger = structlog.get_logger(__name__)


class InMemoryDatabase:
    """In-memory implementation of DatabasePort.

    Every call is counted and checked against `faults` before any state
    is touched, so an injected failure never leaves a partial write.
    """

    def __init__(
        self,
        records: Mapping[str, Mapping[str, str]] | None = None,
        table_name: str = "records",
    ) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, dict[str, str]] = {}
        self.table_name = table_name
        self.faults = FaultPlan()
        for key, value in (records or {}).items():
            record = Record(key, value)
            self._records[record.key] = dict(record.value)

    def get(self, key: str) -> Record:
        self.faults.record("get", key if isinstance(key, str) else "")
        require_key(key)
        with self._lock:
            value = self._records.get(key)
        if value is None:
            raise NotFoundError(key)
        return Record(key, value)

    def put(self, record: Record) -> None:
        self.faults.record("put", record.key)
        require_key(record.key)
        with self._lock:
            self._records[record.key] = dict(record.value)
        logger.debug("memory_record_put", table=self.table_name, key=record.key)

    def call_count(self, call: str | None = None) -> int:
        """Number of port calls made (optionally for one call name)."""
        return self.faults.call_count(call)

    def clear(self) -> None:
        """Drop all records and reset faults."""
        with self._lock:
            self._records.clear()
        self.faults.reset()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
