"""Outbound adapters - implementations of outbound ports.

These adapters implement the DatabasePort and StoragePort contracts:
in-memory doubles with fault injection for tests, and file-based
stores for local development.
"""

from lambda_service.adapters.outbound.fault_injection import FaultPlan, InjectedFault
from lambda_service.adapters.outbound.file_database import FileDatabase
from lambda_service.adapters.outbound.file_storage import FileStorage
from lambda_service.adapters.outbound.memory_database import InMemoryDatabase
from lambda_service.adapters.outbound.memory_storage import InMemoryStorage

__all__ = [
    "FaultPlan",
    "InjectedFault",
    "FileDatabase",
    "FileStorage",
    "InMemoryDatabase",
    "InMemoryStorage",
]
