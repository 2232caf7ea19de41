"""Inbound ports - API contracts offered to transport shims.

Transport shims only depend on RequestHandlerPort, never on the
concrete processor class.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from lambda_service.domain.entities import RequestPayload, ResponsePayload


@runtime_checkable
class RequestHandlerPort(Protocol):
    """Protocol for turning a decoded request into a response.

    Implementations must be total over well-formed RequestPayload values:
    every failure is returned as an error ResponsePayload, never raised.

    Example:
        response = handler.handle(RequestPayload(message="hi"))
        if response.is_success:
            ...
    """

    @abstractmethod
    def handle(self, request: RequestPayload) -> ResponsePayload:
        """Process one request.

        Args:
            request: Decoded inbound request.

        Returns:
            Structured response, stamped with the current UTC time.
        """
        ...


__all__ = ["RequestHandlerPort"]
