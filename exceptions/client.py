"""
Exceptions observed only by the API client.
"""

from .base import StorefrontException


class TransientNetworkException(StorefrontException):
    """Raised when a request did not complete (connection error, timeout)."""
    pass


class CartRequestException(StorefrontException):
    """Raised when the server answered a cart request with a non-auth error status."""

    def __init__(self, status: int, message: str, code: str | None = None):
        super().__init__(message, details={'status': status, 'code': code})
        self.status = status
        self.code = code
