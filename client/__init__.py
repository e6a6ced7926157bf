"""
Async client for the storefront API.

StorefrontApiClient speaks HTTP, CartController keeps an optimistic local
cart in sync with the server, AuthSession ties sign-in state to both.
"""

from .api_client import StorefrontApiClient
from .cart_controller import CartController
from .session import AuthSession

__all__ = ['StorefrontApiClient', 'CartController', 'AuthSession']
