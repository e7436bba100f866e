"""Error taxonomy for list screens.

Transport errors come from the network layer, application errors are
``success: false`` envelopes from the API, and validation errors are raised
client-side before anything is sent.
"""

from __future__ import annotations


class ListingError(Exception):
    """Base class for every error a list screen can surface."""


class TransportError(ListingError):
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ApplicationError(ListingError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(ListingError):
    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class ItemNotFoundError(ListingError):
    def __init__(self, resource: str, item_id: str):
        super().__init__(f"{resource} item not found: {item_id}")
        self.resource = resource
        self.item_id = item_id
