"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are protocols that define contracts:
- Inbound ports: APIs offered to transport shims (RequestHandlerPort)
- Outbound ports: dependencies on external systems (DatabasePort, StoragePort)

Adapters implement these ports with concrete functionality.
"""

from lambda_service.ports.inbound import RequestHandlerPort
from lambda_service.ports.outbound import DatabasePort, StoragePort

__all__ = [
    # Inbound ports
    "RequestHandlerPort",
    # Outbound ports
    "DatabasePort",
    "StoragePort",
]
