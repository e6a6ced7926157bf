import asyncio
import logging
from typing import Any

import aiohttp

import config
from exceptions.base import AuthorizationException
from exceptions.client import TransientNetworkException, CartRequestException
from models.cartLine import CartLineDTO

logger = logging.getLogger(__name__)


class StorefrontApiClient:
    """
    Thin aiohttp wrapper around the storefront HTTP API.

    Error mapping:
        401                     -> AuthorizationException
        other 4xx/5xx           -> CartRequestException (server's "error" text)
        connection error/timeout -> TransientNetworkException

    The refresh token travels in an HTTP-only cookie kept by the session's
    cookie jar; the access token is held here and sent as a bearer header.

    Usage:
        async with StorefrontApiClient("http://localhost:3002") as api:
            await api.login("ada@example.com", "secret")
            items = await api.get_cart()
    """

    def __init__(self,
                 base_url: str | None = None,
                 timeout: float | None = None,
                 session: aiohttp.ClientSession | None = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.CLIENT_REQUEST_TIMEOUT_SECONDS)
        self.access_token: str | None = None
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "StorefrontApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            # unsafe=True keeps cookies for IP hosts (127.0.0.1 in development)
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                cookie_jar=aiohttp.CookieJar(unsafe=True),
            )
        return self._session

    async def request(self, method: str, path: str, json: Any = None) -> dict:
        url = f"{self.base_url}{path}"
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            async with self._get_session().request(method, url, json=json, headers=headers,
                                                   timeout=self.timeout) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"[ApiClient] {method} {path} failed: {type(e).__name__}")
            raise TransientNetworkException(f"Network error: {type(e).__name__}") from e

        body = body if isinstance(body, dict) else {}
        if status == 401:
            raise AuthorizationException(body.get("error") or "Unauthorized", details={'code': body.get("code")})
        if status >= 400:
            raise CartRequestException(status, body.get("error") or f"Request failed with status {status}",
                                       body.get("code"))
        return body

    @staticmethod
    def parse_items(body: dict) -> list[CartLineDTO] | None:
        """Snapshot carried by a response, or None if the response has none."""
        items = body.get("items")
        if not isinstance(items, list):
            return None
        return [CartLineDTO.model_validate(item) for item in items]

    # Auth

    async def register(self, name: str, email: str, password: str) -> int:
        body = await self.request("POST", "/api/auth/register",
                                  {"name": name, "email": email, "password": password})
        return body["userId"]

    async def login(self, email: str, password: str) -> dict:
        body = await self.request("POST", "/api/auth/login", {"email": email, "password": password})
        self.access_token = body.get("token")
        return body["user"]

    async def refresh(self) -> dict:
        body = await self.request("POST", "/api/auth/refresh")
        self.access_token = body.get("token")
        return body["user"]

    async def verify(self) -> dict:
        body = await self.request("GET", "/api/auth/verify")
        return body["user"]

    async def logout(self) -> None:
        try:
            await self.request("POST", "/api/auth/logout")
        finally:
            self.access_token = None

    # Profile & contact

    async def get_profile(self, user_id: int) -> dict:
        return await self.request("GET", f"/api/user/{user_id}")

    async def update_profile(self, user_id: int, profile: dict) -> None:
        await self.request("PUT", f"/api/user/{user_id}", profile)

    async def send_contact(self, name: str, email: str, message: str) -> int:
        body = await self.request("POST", "/api/contact", {"name": name, "email": email, "message": message})
        return body["contactId"]

    # Cart

    async def get_cart(self) -> list[CartLineDTO] | None:
        return self.parse_items(await self.request("GET", "/api/cart"))

    async def upsert_item(self, line: CartLineDTO) -> list[CartLineDTO] | None:
        return self.parse_items(await self.request("POST", "/api/cart", line.model_dump(by_alias=True)))

    async def replace_cart(self, lines: list[CartLineDTO]) -> list[CartLineDTO] | None:
        payload = {"items": [line.model_dump(by_alias=True) for line in lines]}
        return self.parse_items(await self.request("PUT", "/api/cart", payload))

    async def set_quantity(self, product_id: int, quantity: int) -> list[CartLineDTO] | None:
        return self.parse_items(await self.request("PUT", f"/api/cart/{product_id}", {"quantity": quantity}))

    async def remove_item(self, product_id: int) -> list[CartLineDTO] | None:
        return self.parse_items(await self.request("DELETE", f"/api/cart/{product_id}"))

    async def clear_cart(self) -> list[CartLineDTO] | None:
        return self.parse_items(await self.request("DELETE", "/api/cart"))
