"""Domain entities for the lambda service.

Exports:
    Payloads:
        - RequestPayload: Decoded inbound request (message, data)
        - ResponsePayload: Structured response with status and timestamp
        - ResponseStatus: success / error
"""

from lambda_service.domain.entities.payloads import (
    RequestPayload,
    ResponsePayload,
    ResponseStatus,
)

__all__ = [
    "RequestPayload",
    "ResponsePayload",
    "ResponseStatus",
]
