"""
Unit Tests: StorefrontApiClient

Runs the client against a stub aiohttp server to check status mapping,
bearer headers, cookie handling and timeouts.
"""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from exceptions.base import AuthorizationException
from exceptions.client import TransientNetworkException, CartRequestException
from models.cartLine import CartLineDTO
from client.api_client import StorefrontApiClient

SNAPSHOT = {"items": [{"productId": 42, "title": "Mug", "price": 9.99, "image": "", "quantity": 2}]}


async def login(request: web.Request) -> web.Response:
    body = await request.json()
    if body.get("password") != "correct-horse":
        return web.json_response({"error": "Invalid email or password", "code": "INVALID_CREDENTIALS"}, status=401)
    response = web.json_response({"token": "access-1", "user": {"id": 1, "name": "Ada", "email": body["email"]}})
    response.set_cookie("refreshToken", "refresh-1", httponly=True, samesite="Strict")
    return response


async def refresh(request: web.Request) -> web.Response:
    if request.cookies.get("refreshToken") != "refresh-1":
        return web.json_response({"error": "Authorization token required", "code": "MISSING_TOKEN"}, status=401)
    return web.json_response({"token": "access-2", "user": {"id": 1, "name": "Ada", "email": "ada@example.com"}})


async def get_cart(request: web.Request) -> web.Response:
    if request.headers.get("Authorization") != "Bearer access-1":
        return web.json_response({"error": "Invalid or expired token", "code": "INVALID_TOKEN"}, status=401)
    return web.json_response(SNAPSHOT)


async def set_quantity(request: web.Request) -> web.Response:
    return web.json_response({"error": "Cart item for product 99 not found", "code": "CART_ITEM_NOT_FOUND"},
                             status=404)


async def clear_cart(request: web.Request) -> web.Response:
    return web.json_response({"message": "Cleared"})


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.json_response({})


async def broken(request: web.Request) -> web.Response:
    return web.Response(text="<html>Bad Gateway</html>", status=502)


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_post("/api/auth/login", login)
    app.router.add_post("/api/auth/refresh", refresh)
    app.router.add_get("/api/cart", get_cart)
    app.router.add_put("/api/cart/{product_id}", set_quantity)
    app.router.add_delete("/api/cart", clear_cart)
    app.router.add_get("/api/slow", slow)
    app.router.add_get("/api/broken", broken)

    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


@pytest_asyncio.fixture
async def api(server):
    async with StorefrontApiClient(base_url=str(server.make_url("/")), timeout=0.5) as client:
        yield client


class TestStatusMapping:

    @pytest.mark.asyncio
    async def test_login_stores_access_token(self, api):
        user = await api.login("ada@example.com", "correct-horse")

        assert user["id"] == 1
        assert api.access_token == "access-1"

    @pytest.mark.asyncio
    async def test_snapshot_parsed_into_lines(self, api):
        await api.login("ada@example.com", "correct-horse")

        items = await api.get_cart()

        assert items == [CartLineDTO(product_id=42, title="Mug", price=9.99, quantity=2)]

    @pytest.mark.asyncio
    async def test_response_without_snapshot_gives_none(self, api):
        assert await api.clear_cart() is None

    @pytest.mark.asyncio
    async def test_401_is_authorization_exception(self, api):
        with pytest.raises(AuthorizationException) as exc_info:
            await api.get_cart()

        assert exc_info.value.message == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_other_errors_carry_server_message(self, api):
        with pytest.raises(CartRequestException) as exc_info:
            await api.set_quantity(99, 3)

        assert exc_info.value.status == 404
        assert exc_info.value.code == "CART_ITEM_NOT_FOUND"
        assert exc_info.value.message == "Cart item for product 99 not found"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, api):
        with pytest.raises(CartRequestException) as exc_info:
            await api.request("GET", "/api/broken")

        assert exc_info.value.status == 502


class TestCookiesAndNetwork:

    @pytest.mark.asyncio
    async def test_refresh_cookie_is_sent_back(self, api):
        await api.login("ada@example.com", "correct-horse")

        user = await api.refresh()

        assert user["id"] == 1
        assert api.access_token == "access-2"

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, api):
        with pytest.raises(TransientNetworkException):
            await api.request("GET", "/api/slow")

    @pytest.mark.asyncio
    async def test_connection_refused_is_transient(self):
        stopped = TestServer(web.Application())
        await stopped.start_server()
        url = str(stopped.make_url("/"))
        await stopped.close()

        async with StorefrontApiClient(base_url=url, timeout=0.5) as client:
            with pytest.raises(TransientNetworkException):
                await client.get_cart()
