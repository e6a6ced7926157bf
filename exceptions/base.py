"""
Base exception classes for the storefront service.
"""


class StorefrontException(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions in the service should inherit from this class.
    This allows catching all service-specific exceptions with a single handler.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, field names, etc.)
    """

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ValidationException(StorefrontException):
    """Raised when input has a bad shape or value. Never reaches storage."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, details={'field': field} if field else None)
        self.field = field


class AuthorizationException(StorefrontException):
    """Raised when a credential is missing, invalid or expired."""

    def __init__(self, message: str = "Unauthorized", details: dict | None = None):
        super().__init__(message, details)


class ForbiddenException(StorefrontException):
    """Raised when an authenticated caller touches a resource it does not own."""

    def __init__(self, message: str = "Access denied", details: dict | None = None):
        super().__init__(message, details)


class NotFoundException(StorefrontException):
    """Raised when a well-formed request matches no stored row."""
    pass


class StorageException(StorefrontException):
    """Raised on any persistence-layer failure."""

    def __init__(self, message: str = "Storage operation failed", details: dict | None = None):
        super().__init__(message, details)
