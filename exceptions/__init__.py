"""
Custom exceptions for the storefront service.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── ValidationException
├── AuthorizationException
│   ├── MissingTokenException
│   ├── InvalidTokenException
│   └── InvalidCredentialsException
├── ForbiddenException
├── NotFoundException
│   ├── CartLineNotFoundException
│   └── UserNotFoundException
├── EmailAlreadyRegisteredException
├── StorageException
│   └── StorageTimeoutException
├── TransientNetworkException (client only)
└── CartRequestException (client only)

Usage:
------
Services raise specific exceptions:
    raise CartLineNotFoundException(user_id=7, product_id=99)

The web layer maps them to HTTP responses (utils/error_handler.py):
    404 {"error": "Cart item for product 99 not found", "code": "CART_ITEM_NOT_FOUND"}
"""

from .base import (
    StorefrontException,
    ValidationException,
    AuthorizationException,
    ForbiddenException,
    NotFoundException,
    StorageException,
)
from .auth import MissingTokenException, InvalidTokenException, InvalidCredentialsException
from .cart import CartLineNotFoundException
from .client import TransientNetworkException, CartRequestException
from .storage import StorageTimeoutException
from .user import UserNotFoundException, EmailAlreadyRegisteredException

__all__ = [
    # Base
    'StorefrontException',
    'ValidationException',
    'AuthorizationException',
    'ForbiddenException',
    'NotFoundException',
    'StorageException',

    # Auth
    'MissingTokenException',
    'InvalidTokenException',
    'InvalidCredentialsException',

    # Cart
    'CartLineNotFoundException',

    # Storage
    'StorageTimeoutException',

    # User
    'UserNotFoundException',
    'EmailAlreadyRegisteredException',

    # Client
    'TransientNetworkException',
    'CartRequestException',
]
