import logging

from client.api_client import StorefrontApiClient
from client.cart_controller import CartController
from exceptions.base import AuthorizationException
from exceptions.client import TransientNetworkException

logger = logging.getLogger(__name__)


class AuthSession:
    """
    Sign-in state of the client.

    Keeps the signed-in user and drives the cart controller between
    anonymous and server mode. When the cart reports a rejected identity,
    the session forgets its user as well.
    """

    def __init__(self, api: StorefrontApiClient, cart: CartController):
        self.api = api
        self.cart = cart
        self.user: dict | None = None

        forward = cart.on_unauthorized

        def on_unauthorized():
            self.user = None
            if forward is not None:
                forward()

        cart.on_unauthorized = on_unauthorized

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def sign_in(self, email: str, password: str) -> dict:
        """
        Log in and switch the cart to the user's server cart.

        Raises:
            AuthorizationException: Wrong email or password
        """
        self.user = await self.api.login(email, password)
        logger.info(f"[Session] Signed in as user {self.user['id']}")
        await self.cart.sign_in()
        return self.user

    async def restore(self) -> bool:
        """
        Resume a previous session using the access token, or the refresh cookie.

        Returns:
            bool: True if a user is signed in afterwards
        """
        try:
            if self.api.access_token:
                try:
                    self.user = await self.api.verify()
                except AuthorizationException:
                    self.user = await self.api.refresh()
            else:
                self.user = await self.api.refresh()
        except AuthorizationException:
            logger.info("[Session] No valid session to restore")
            self._forget()
            return False

        await self.cart.sign_in()
        return True

    async def sign_out(self) -> None:
        try:
            await self.api.logout()
        except TransientNetworkException as e:
            logger.warning(f"[Session] Logout request failed, signing out locally: {e.message}")
        finally:
            self._forget()

    def _forget(self) -> None:
        self.user = None
        self.api.access_token = None
        self.cart.sign_out()
