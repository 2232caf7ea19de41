"""Application layer for the lambda service.

The application layer orchestrates domain logic to fulfil use cases.

Exports:
    - RequestProcessor: Validates requests, drives the ports, builds responses
    - ERROR_MESSAGES: Human-readable message per error kind
"""

from lambda_service.application.request_processor import (
    ERROR_MESSAGES,
    INVALID_DATA_FORMAT,
    NO_MESSAGE,
    RECEIVED_MESSAGE,
    RequestProcessor,
    utc_now,
)

__all__ = [
    "RequestProcessor",
    "ERROR_MESSAGES",
    "INVALID_DATA_FORMAT",
    "NO_MESSAGE",
    "RECEIVED_MESSAGE",
    "utc_now",
]
