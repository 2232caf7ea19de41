"""Inbound adapters for the lambda service.

Inbound adapters decode incoming events into RequestPayloads and encode
ResponsePayloads back onto the wire.

Exports:
    Serverless shim:
        - LambdaHandler: Callable event handler bound to a processor
        - handler: Process-wide serverless entry point
        - decode_event / encode_response: Event codec
        - status_code_for: ResponsePayload -> HTTP status code
    REST API:
        - create_app: Create a FastAPI application
        - run_server: Run the REST API server
"""

from lambda_service.adapters.inbound.lambda_handler import (
    LambdaHandler,
    decode_event,
    encode_response,
    handler,
    status_code_for,
)
from lambda_service.adapters.inbound.rest_api import create_app, run_server

__all__ = [
    # Serverless shim
    "LambdaHandler",
    "handler",
    "decode_event",
    "encode_response",
    "status_code_for",
    # REST API
    "create_app",
    "run_server",
]
