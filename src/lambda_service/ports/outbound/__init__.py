"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the systems the request processor
depends on: a key/value record store and a blob store.
"""

from lambda_service.domain.errors import (
    ErrorKind,
    InvalidArgumentError,
    NotFoundError,
    PortError,
    StorageUnavailableError,
)
from lambda_service.ports.outbound.database_port import DatabasePort
from lambda_service.ports.outbound.storage_port import StoragePort

__all__ = [
    "DatabasePort",
    "StoragePort",
    "ErrorKind",
    "PortError",
    "InvalidArgumentError",
    "NotFoundError",
    "StorageUnavailableError",
]
