"""
Persistence-layer exceptions.
"""

from .base import StorageException


class StorageTimeoutException(StorageException):
    """Raised when a store operation exceeds its time bound."""

    def __init__(self, timeout: float):
        super().__init__(
            f"Storage operation timed out after {timeout}s",
            details={'timeout': timeout}
        )
        self.timeout = timeout
