"""
Cart-related exceptions.
"""

from .base import NotFoundException


class CartLineNotFoundException(NotFoundException):
    """Raised when a (user, product) pair has no cart line."""

    def __init__(self, user_id: int, product_id: int):
        super().__init__(
            f"Cart item for product {product_id} not found",
            details={'user_id': user_id, 'product_id': product_id}
        )
        self.user_id = user_id
        self.product_id = product_id
