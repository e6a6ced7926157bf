"""
Unit Tests: utils/error_handler.py

Exception -> (status, code) mapping and rendered response bodies.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from exceptions import (
    ValidationException,
    InvalidTokenException,
    ForbiddenException,
    CartLineNotFoundException,
    UserNotFoundException,
    EmailAlreadyRegisteredException,
    StorageException,
    StorageTimeoutException,
    NotFoundException,
)
from utils.error_handler import resolve_error, register_exception_handlers


class TestResolveError:

    @pytest.mark.parametrize("exception,expected", [
        (ValidationException("bad", field="quantity"), (400, "VALIDATION_ERROR")),
        (InvalidTokenException(), (401, "INVALID_TOKEN")),
        (ForbiddenException(), (403, "FORBIDDEN")),
        (CartLineNotFoundException(7, 99), (404, "CART_ITEM_NOT_FOUND")),
        (UserNotFoundException(3), (404, "USER_NOT_FOUND")),
        (NotFoundException("gone"), (404, "NOT_FOUND")),
        (EmailAlreadyRegisteredException("a@example.com"), (409, "EMAIL_EXISTS")),
        (StorageException(), (500, "STORAGE_ERROR")),
    ])
    def test_mapping(self, exception, expected):
        assert resolve_error(exception) == expected

    def test_subclass_falls_back_to_ancestor(self):
        assert resolve_error(StorageTimeoutException(5)) == (500, "STORAGE_ERROR")


@pytest.fixture
def failing_client():
    """Minimal app whose routes raise the given failures."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise CartLineNotFoundException(7, 99)

    @app.get("/storage")
    async def storage():
        try:
            raise OperationalError("SELECT * FROM carts", {}, Exception("database is locked"))
        except OperationalError as e:
            raise StorageException() from e

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.get("/typed/{number}")
    async def typed(number: int):
        return {"number": number}

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


class TestRenderedResponses:

    def test_not_found_body(self, failing_client):
        response = failing_client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {"error": "Cart item for product 99 not found", "code": "CART_ITEM_NOT_FOUND"}

    def test_storage_error_hides_internals(self, failing_client):
        response = failing_client.get("/storage")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "STORAGE_ERROR"
        assert "locked" not in body["error"]
        assert "carts" not in body["error"]

    def test_unexpected_error_is_generic_500(self, failing_client):
        response = failing_client.get("/boom")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        assert "secret" not in response.text

    def test_request_validation_is_400(self, failing_client):
        response = failing_client.get("/typed/abc")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
