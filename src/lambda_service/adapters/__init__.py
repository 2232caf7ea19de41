"""Adapters layer - implementations of ports.

Adapters connect the application to external systems:
- Inbound adapters: serverless event shim, REST API
- Outbound adapters: in-memory and file-based record/blob stores
"""
