"""
User-related exceptions.
"""

from .base import NotFoundException, StorefrontException


class UserNotFoundException(NotFoundException):
    """Raised when user is not found in database."""

    def __init__(self, user_id: int | None = None):
        if user_id:
            message = f"User with ID {user_id} not found"
            details = {'user_id': user_id}
        else:
            message = "User not found"
            details = {}

        super().__init__(message, details)
        self.user_id = user_id


class EmailAlreadyRegisteredException(StorefrontException):
    """Raised when registering with an email that is already taken."""

    def __init__(self, email: str):
        super().__init__("Email already registered", details={'email': email})
        self.email = email
