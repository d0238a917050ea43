# sales/services/exceptions.py

"""
SALES SERVICE ERRORS

Centralized domain errors for the sale ledger core.

Every error carries a stable `code` and the HTTP status the API layer
maps it to, so views never guess.
"""

from __future__ import annotations


class SalesError(Exception):
    """Base exception for all sale ledger failures."""

    code = "SALES_ERROR"
    http_status = 400

    def __init__(self, message: str = "", *, details: dict | None = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details or {}


class ValidationError(SalesError):
    """Malformed or missing input (empty items, unknown payment method, ...)."""

    code = "VALIDATION_ERROR"
    http_status = 400


class NotFound(SalesError):
    """Sale, product, inventory row or customer does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class InsufficientStock(SalesError):
    """Availability check failed for a product at the sale's location."""

    code = "INSUFFICIENT_STOCK"
    http_status = 409

    def __init__(self, *, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Required: {requested}",
            details={
                "product_name": product_name,
                "available": available,
                "requested": requested,
            },
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class InvalidState(SalesError):
    """Operation not permitted for the sale's current status."""

    code = "INVALID_STATE"
    http_status = 409


class InternalError(SalesError):
    """Unexpected persistence failure; the transaction was rolled back."""

    code = "INTERNAL_ERROR"
    http_status = 500
