"""File-based record store adapter.

Implements DatabasePort on the local filesystem. Each record is a JSON
document; writes go to a temporary file that is atomically renamed
over the target, so readers never observe a partial record.

Usage:
    db = FileDatabase("/path/to/data", table_name="records")
    db.put(Record("user-1", {"name": "Alice"}))
    record = db.get("user-1")

Directory structure:
    data_dir/
        records/
            user-1.json
"""

from __future__ import annotations

import errno
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
from urllib.parse import quote

import structlog

from lambda_service.domain.errors import (
    InvalidArgumentError,
    NotFoundError,
    StorageUnavailableError,
)
from lambda_service.domain.value_objects import Record, require_key


logger = structlog.get_logger(__name__)


def key_to_filename(key: str, suffix: str) -> str:
    """Filesystem-safe, collision-free file name for a key."""
    return quote(key, safe="") + suffix


def translate_os_error(exc: OSError, key: str) -> Exception:
    """Map an OSError to the port error taxonomy."""
    if exc.errno == errno.ENAMETOOLONG:
        return InvalidArgumentError(f"Key too long for file backend: {key[:32]}...")
    return StorageUnavailableError(f"File backend I/O failure for {key!r}: {exc}")


class FileDatabase:
    """File-based implementation of DatabasePort.

    Attributes:
        table_dir: Directory holding one JSON file per record.
    """

    def __init__(
        self,
        data_dir: str | Path,
        table_name: str = "records",
        lock_timeout: float = 5.0,
    ) -> None:
        """Initialize file storage.

        Args:
            data_dir: Root directory for all tables.
            table_name: Table (sub-directory) name.
            lock_timeout: Seconds to wait for the write lock before
                failing with StorageUnavailableError.
        """
        self.table_dir = Path(data_dir) / table_name
        self.table_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise StorageUnavailableError(f"Timed out waiting for table lock on {key!r}")
        try:
            yield
        finally:
            self._lock.release()

    def _path(self, key: str) -> Path:
        return self.table_dir / key_to_filename(key, ".json")

    def get(self, key: str) -> Record:
        require_key(key)
        path = self._path(key)
        try:
            with self._locked(key):
                raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(key) from None
        except OSError as e:
            raise translate_os_error(e, key) from e

        try:
            document = json.loads(raw)
            return Record(document["key"], document["value"])
        except (ValueError, KeyError, TypeError, InvalidArgumentError) as e:
            raise StorageUnavailableError(f"Corrupt record file for {key!r}") from e

    def put(self, record: Record) -> None:
        require_key(record.key)
        payload = json.dumps(record.to_dict(), sort_keys=True)
        path = self._path(record.key)
        try:
            with self._locked(record.key):
                fd, tmp_name = tempfile.mkstemp(dir=self.table_dir, suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as handle:
                        handle.write(payload)
                        handle.flush()
                        os.fsync(handle.fileno())
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
        except OSError as e:
            raise translate_os_error(e, record.key) from e

        logger.debug("file_record_put", path=str(path), key=record.key)
