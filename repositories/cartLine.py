import logging
from collections.abc import Sequence

from sqlalchemy import select, update, delete
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from exceptions.base import ValidationException
from models.cartLine import CartLine, CartLineDTO
from utils.cart_validation import parse_positive_int, normalize_line_input, require_email
from utils.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)


class CartLineRepository:
    """
    Cart store: the single access path to the carts table.

    Every method is its own bounded-time transaction. Storage failures
    surface as StorageException, bad input as ValidationException raised
    before anything is written.
    """

    @staticmethod
    def to_dto(line: CartLine) -> CartLineDTO:
        return CartLineDTO(
            product_id=line.product_id,
            title=line.title or "",
            price=line.price or 0.0,
            image=line.image or "",
            quantity=line.quantity,
        )

    @staticmethod
    async def list_by_user(user_id: int, session: AsyncSession) -> list[CartLineDTO]:
        user_id = parse_positive_int(user_id, "userId")
        stmt = select(CartLine).where(CartLine.user_id == user_id).order_by(CartLine.id)
        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
            return [CartLineRepository.to_dto(line) for line in result.scalars().all()]

    @staticmethod
    async def replace_all(user_id: int, email: str, lines: Sequence, session: AsyncSession) -> None:
        """
        Replace the user's whole cart: delete every line, insert the supplied set.

        All-or-nothing. Input is fully validated before the delete runs; a failing
        insert rolls the delete back as well.

        Args:
            user_id: Owner of the cart
            email: Owner email, copied onto every line
            lines: Sequence of mappings (productId, title, price, image, quantity)
            session: Database session

        Raises:
            ValidationException: lines is not a sequence, an element is malformed,
                or two elements share a product id
            StorageException: Any persistence failure (nothing is written)
        """
        user_id = parse_positive_int(user_id, "userId")
        email = require_email(email)
        if isinstance(lines, (str, bytes)) or not isinstance(lines, Sequence):
            raise ValidationException("Cart items must be a list", field="items")

        normalized = [normalize_line_input(line) for line in lines]
        product_ids = [values["product_id"] for values in normalized]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationException("Cart items must not repeat a product", field="items")

        async with TransactionManager.atomic_transaction(session):
            await session_execute(delete(CartLine).where(CartLine.user_id == user_id), session)
            for values in normalized:
                session.add(CartLine(user_id=user_id, email=email, **values))
                await session_flush(session)

        logger.info(f"Cart replaced for user {user_id} ({len(normalized)} lines)")

    @staticmethod
    async def upsert(user_id: int, email: str, item, session: AsyncSession) -> int:
        """
        Insert a line or, if (user, product) exists, add to its quantity.

        Quantity is additive; title/price/image take the new values.
        The unique constraint resolves the conflict inside SQLite, so two
        concurrent upserts can never produce two rows.

        Returns:
            int: id of the inserted or updated line
        """
        user_id = parse_positive_int(user_id, "userId")
        email = require_email(email)
        values = normalize_line_input(item)

        stmt = sqlite_insert(CartLine).values(user_id=user_id, email=email, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartLine.user_id, CartLine.product_id],
            set_={
                "quantity": CartLine.quantity + stmt.excluded.quantity,
                "title": stmt.excluded.title,
                "price": stmt.excluded.price,
                "image": stmt.excluded.image,
            },
        ).returning(CartLine.id)

        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
            line_id = result.scalar_one()

        logger.info(f"Cart upsert user={user_id} product={values['product_id']} +{values['quantity']}")
        return line_id

    @staticmethod
    async def set_quantity(user_id: int, product_id: int, quantity: int, session: AsyncSession) -> bool:
        """
        Set the stored quantity exactly. Returns False if no line matched.

        Raises:
            ValidationException: quantity is not a positive integer
        """
        user_id = parse_positive_int(user_id, "userId")
        product_id = parse_positive_int(product_id, "productId")
        quantity = parse_positive_int(quantity, "quantity")

        stmt = (update(CartLine)
                .where(CartLine.user_id == user_id, CartLine.product_id == product_id)
                .values(quantity=quantity))
        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
        return result.rowcount > 0

    @staticmethod
    async def remove_line(user_id: int, product_id: int, session: AsyncSession) -> bool:
        user_id = parse_positive_int(user_id, "userId")
        product_id = parse_positive_int(product_id, "productId")

        stmt = delete(CartLine).where(CartLine.user_id == user_id, CartLine.product_id == product_id)
        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
        return result.rowcount > 0

    @staticmethod
    async def clear(user_id: int, session: AsyncSession) -> bool:
        user_id = parse_positive_int(user_id, "userId")

        stmt = delete(CartLine).where(CartLine.user_id == user_id)
        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
        return result.rowcount > 0
