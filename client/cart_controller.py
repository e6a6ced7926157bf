import logging
from typing import Awaitable, Callable

from client.api_client import StorefrontApiClient
from enums.mutation_outcome import MutationOutcome
from exceptions.base import StorefrontException, AuthorizationException
from models.cartLine import CartLineDTO

logger = logging.getLogger(__name__)

CartCall = Callable[[], Awaitable[list[CartLineDTO] | None]]


class CartController:
    """
    Client-side cart with optimistic updates.

    Every mutation installs its new local state immediately, then asks the
    server. A server snapshot in the response replaces local state verbatim;
    a failure restores the state captured before the mutation.

    Anonymous carts never touch the server. Each server mutation gets a
    generation number; a response for an older generation than the latest
    issued one is discarded. Authorization failures are never discarded:
    they clear identity and cart state and call on_unauthorized.

    Attributes:
        items: Current visible cart lines
        last_error: Message of the most recent failed mutation, None after a success
    """

    def __init__(self,
                 api: StorefrontApiClient,
                 on_error: Callable[[str], None] | None = None,
                 on_unauthorized: Callable[[], None] | None = None):
        self.api = api
        self.on_error = on_error
        self.on_unauthorized = on_unauthorized
        self.items: list[CartLineDTO] = []
        self.signed_in = False
        self.last_error: str | None = None
        self._generation = 0

    @property
    def is_anonymous(self) -> bool:
        return not self.signed_in

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total_price(self) -> float:
        return round(sum(line.subtotal for line in self.items), 2)

    def find(self, product_id: int) -> CartLineDTO | None:
        for line in self.items:
            if line.product_id == product_id:
                return line
        return None

    def _with_quantity(self, product_id: int, quantity: int) -> list[CartLineDTO]:
        return [line.model_copy(update={"quantity": quantity}) if line.product_id == product_id else line
                for line in self.items]

    # Mutations

    async def add(self, line: CartLineDTO) -> MutationOutcome:
        """Add a product; if already present its quantity grows by line.quantity."""
        existing = self.find(line.product_id)
        if existing is None:
            new_items = [*self.items, line]
        else:
            new_items = [line.model_copy(update={"quantity": existing.quantity + line.quantity})
                         if item.product_id == line.product_id else item
                         for item in self.items]
        return await self._mutate(new_items, lambda: self.api.upsert_item(line))

    async def increment(self, product_id: int) -> MutationOutcome:
        existing = self.find(product_id)
        if existing is None:
            return MutationOutcome.NOOP
        return await self.set_quantity(product_id, existing.quantity + 1)

    async def decrement(self, product_id: int) -> MutationOutcome:
        existing = self.find(product_id)
        if existing is None:
            return MutationOutcome.NOOP
        return await self.set_quantity(product_id, existing.quantity - 1)

    async def set_quantity(self, product_id: int, quantity: int) -> MutationOutcome:
        """Set a line's quantity exactly; values below 1 are clamped to 1."""
        existing = self.find(product_id)
        quantity = max(1, quantity)
        if existing is None or existing.quantity == quantity:
            return MutationOutcome.NOOP
        return await self._mutate(self._with_quantity(product_id, quantity),
                                  lambda: self.api.set_quantity(product_id, quantity))

    async def remove(self, product_id: int) -> MutationOutcome:
        if self.find(product_id) is None:
            return MutationOutcome.NOOP
        new_items = [line for line in self.items if line.product_id != product_id]
        return await self._mutate(new_items, lambda: self.api.remove_item(product_id))

    async def clear(self) -> MutationOutcome:
        if not self.items:
            return MutationOutcome.NOOP
        return await self._mutate([], self.api.clear_cart)

    async def reload(self) -> MutationOutcome:
        """Replace local state with the server snapshot."""
        if self.is_anonymous:
            return MutationOutcome.NOOP
        return await self._mutate(self.items, self.api.get_cart)

    # Identity

    async def sign_in(self) -> MutationOutcome:
        """
        Switch to server mode.

        The anonymous cart is discarded, not merged, and the server snapshot loaded.
        """
        if self.items:
            logger.info(f"[Cart] Discarding anonymous cart ({len(self.items)} lines) on sign-in")
        self.signed_in = True
        self.items = []
        return await self.reload()

    def sign_out(self) -> None:
        self.abandon()
        self.signed_in = False
        self.items = []

    def abandon(self) -> None:
        """Mark every in-flight request as superseded; local state is kept."""
        self._generation += 1

    # Internals

    async def _mutate(self, new_items: list[CartLineDTO], call: CartCall) -> MutationOutcome:
        previous = self.items
        self.items = new_items
        if self.is_anonymous:
            return MutationOutcome.APPLIED

        self._generation += 1
        generation = self._generation
        try:
            snapshot = await call()
        except AuthorizationException as e:
            self._handle_unauthorized(e)
            return MutationOutcome.UNAUTHORIZED
        except StorefrontException as e:
            return self._roll_back(generation, previous, e.message)
        except Exception:
            logger.exception(f"[Cart] Unexpected error in mutation {generation}")
            return self._roll_back(generation, previous, "Unexpected error, changes were reverted")

        if generation != self._generation:
            logger.debug(f"[Cart] Discarding response of superseded mutation {generation}")
            return MutationOutcome.SUPERSEDED
        if snapshot is not None:
            self.items = snapshot
        self.last_error = None
        return MutationOutcome.APPLIED

    def _roll_back(self, generation: int, previous: list[CartLineDTO], message: str) -> MutationOutcome:
        if generation != self._generation:
            logger.debug(f"[Cart] Discarding failure of superseded mutation {generation}")
            return MutationOutcome.SUPERSEDED
        self.items = previous
        self._report(message)
        return MutationOutcome.ROLLED_BACK

    def _report(self, message: str) -> None:
        self.last_error = message
        logger.warning(f"[Cart] Mutation failed and was rolled back: {message}")
        if self.on_error is not None:
            self.on_error(message)

    def _handle_unauthorized(self, error: AuthorizationException) -> None:
        logger.warning("[Cart] Session rejected, clearing identity and cart")
        self.sign_out()
        self.api.access_token = None
        self.last_error = error.message
        if self.on_unauthorized is not None:
            self.on_unauthorized()
