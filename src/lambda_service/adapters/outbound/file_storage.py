"""File-based blob store adapter.

Implements StoragePort on the local filesystem, one file per object.

Directory structure:
    data_dir/
        objects/
            report.pdf.bin
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path

import structlog

from lambda_service.adapters.outbound.file_database import key_to_filename, translate_os_error
from lambda_service.domain.errors import (
    InvalidArgumentError,
    NotFoundError,
    StorageUnavailableError,
)
from lambda_service.domain.value_objects import Blob, require_key


logger = structlog.get_logger(__name__)


class FileStorage:
    """File-based implementation of StoragePort.

    Writes are atomic (temp file plus rename). Suitable for local
    development and single-node deployments.
    """

    def __init__(
        self,
        data_dir: str | Path,
        bucket_name: str = "objects",
        allow_empty_objects: bool = True,
        lock_timeout: float = 5.0,
    ) -> None:
        self.bucket_dir = Path(data_dir) / bucket_name
        self.bucket_dir.mkdir(parents=True, exist_ok=True)
        self._allow_empty = allow_empty_objects
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout

    @property
    def allows_empty_objects(self) -> bool:
        return self._allow_empty

    def _path(self, key: str) -> Path:
        return self.bucket_dir / key_to_filename(key, ".bin")

    def put_object(self, blob: Blob) -> None:
        require_key(blob.key)
        if not blob.content and not self._allow_empty:
            raise InvalidArgumentError(f"Empty objects are not allowed: {blob.key}")

        path = self._path(blob.key)
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise StorageUnavailableError(f"Timed out waiting for bucket lock on {blob.key!r}")
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.bucket_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(blob.content)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise translate_os_error(e, blob.key) from e
        finally:
            self._lock.release()

        logger.debug("file_object_put", path=str(path), size=blob.size)

    def get_object(self, key: str) -> Blob:
        require_key(key)
        try:
            content = self._path(key).read_bytes()
        except FileNotFoundError:
            raise NotFoundError(key) from None
        except OSError as e:
            raise translate_os_error(e, key) from e
        return Blob(key, content)
