import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions.cart import CartLineNotFoundException
from models.cartLine import CartSnapshotDTO
from repositories.cartLine import CartLineRepository
from services.auth import AuthenticatedUser
from utils.cart_validation import parse_positive_int, normalize_line_input

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart operations for an authenticated user.

    Inputs are validated here, before any store call. Every method returns
    the fresh full snapshot of the user's cart, never just the touched line.
    """

    @staticmethod
    async def fetch(user: AuthenticatedUser, session: AsyncSession) -> CartSnapshotDTO:
        items = await CartLineRepository.list_by_user(user.id, session)
        return CartSnapshotDTO(items=items)

    @staticmethod
    async def upsert(user: AuthenticatedUser, item, session: AsyncSession) -> CartSnapshotDTO:
        values = normalize_line_input(item)
        await CartLineRepository.upsert(user.id, user.email, values, session)
        return await CartService.fetch(user, session)

    @staticmethod
    async def replace(user: AuthenticatedUser, items, session: AsyncSession) -> CartSnapshotDTO:
        await CartLineRepository.replace_all(user.id, user.email, items, session)
        return await CartService.fetch(user, session)

    @staticmethod
    async def set_quantity(user: AuthenticatedUser, product_id, quantity, session: AsyncSession) -> CartSnapshotDTO:
        """
        Set one line's quantity exactly.

        Raises:
            ValidationException: product id or quantity is not a positive integer
            CartLineNotFoundException: the user has no line for product_id
        """
        product_id = parse_positive_int(product_id, "productId")
        quantity = parse_positive_int(quantity, "quantity")
        updated = await CartLineRepository.set_quantity(user.id, product_id, quantity, session)
        if not updated:
            raise CartLineNotFoundException(user.id, product_id)
        return await CartService.fetch(user, session)

    @staticmethod
    async def remove(user: AuthenticatedUser, product_id, session: AsyncSession) -> CartSnapshotDTO:
        product_id = parse_positive_int(product_id, "productId")
        removed = await CartLineRepository.remove_line(user.id, product_id, session)
        if not removed:
            raise CartLineNotFoundException(user.id, product_id)
        logger.info(f"Removed product {product_id} from cart of user {user.id}")
        return await CartService.fetch(user, session)

    @staticmethod
    async def clear(user: AuthenticatedUser, session: AsyncSession) -> CartSnapshotDTO:
        # Clearing an empty cart is not an error
        await CartLineRepository.clear(user.id, session)
        return CartSnapshotDTO(items=[])
