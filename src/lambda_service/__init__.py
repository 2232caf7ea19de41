"""
Lambda Service - Hexagonal request-processing core

A serverless HTTP handler core that keeps its business rules behind
two capability ports: a key/value database port and a blob storage port.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
