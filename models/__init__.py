"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
so Base.metadata.create_all() sees every table.
"""

from models.base import Base
from models.user import User
from models.cartLine import CartLine
from models.contact import Contact

__all__ = [
    'Base',
    'User',
    'CartLine',
    'Contact',
]
