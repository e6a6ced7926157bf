"""
Authentication exceptions.

The client treats every AuthorizationException as "re-authenticate",
never as a retryable transient error.
"""

from .base import AuthorizationException


class MissingTokenException(AuthorizationException):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self):
        super().__init__("Authorization token required")


class InvalidTokenException(AuthorizationException):
    """Raised when a token fails signature, type or expiry checks."""

    def __init__(self, reason: str = "Invalid or expired token"):
        super().__init__("Invalid or expired token", details={'reason': reason})
        self.reason = reason


class InvalidCredentialsException(AuthorizationException):
    """Raised when email/password do not match a stored user."""

    def __init__(self):
        super().__init__("Invalid email or password")
