"""API-specific request/response models.

Domain models (orders, checkout results, webhook payloads) are in
payments.models and are reused by the routes directly.

Modules:
- common: Error envelopes, validation error formatting, redirect landing body
"""

__all__: list[str] = []
