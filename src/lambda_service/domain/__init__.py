"""Domain layer - payloads, value types, errors and operations.

The domain layer has no dependencies on adapters or infrastructure.
"""
