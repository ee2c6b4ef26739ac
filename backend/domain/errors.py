"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the exception handlers
in main.py. Each one also names the body key its message is rendered under,
because storefront clients read ``error_message`` from lookup/charge failures
and ``status_message`` from transaction failures.
"""
from fastapi import HTTPException, status

from domain.constants import TRANSACTION_NOT_FOUND_MESSAGE


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    message_key = "error_message"

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class IdentityLookupError(NotFoundError):
    """Identity provider could not resolve the user (404, provider message)."""


class GatewayError(DomainError):
    """
    Payment gateway rejected or failed the operation.

    Rendered as 404 rather than 502: the storefront client only branches on
    404 for a failed checkout.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class TransactionNotFoundError(NotFoundError):
    """Unknown transaction id or a notification that fails verification (404)."""
    message_key = "status_message"

    def __init__(self, message: str = TRANSACTION_NOT_FOUND_MESSAGE, details: dict | None = None):
        super().__init__(message, details=details)
