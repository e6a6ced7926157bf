"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os

import pytest
import pytest_asyncio

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Test configuration, set before config.py is first imported
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ACCESS_TOKEN_SECRET"] = "test_access_secret_0123456789abcdef0123456789"
os.environ["REFRESH_TOKEN_SECRET"] = "test_refresh_secret_0123456789abcdef012345678"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"  # Fast hashing for tests
os.environ["STORE_TIMEOUT_SECONDS"] = "5"
os.environ["CORS_ALLOWED_ORIGINS"] = "http://localhost:3000"

from fastapi.testclient import TestClient

from app import create_app
from db import Database
from services.auth import AuthenticatedUser

MEMORY_DB_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def database():
    """Connected in-memory database with all tables created."""
    db = Database(MEMORY_DB_URL)
    await db.connect()

    yield db

    # Cleanup
    await db.dispose()


@pytest_asyncio.fixture
async def test_session(database):
    """Create test database session."""
    async with database.session() as session:
        yield session


@pytest.fixture
def cart_user():
    """Authenticated identity used by cart store and service tests."""
    return AuthenticatedUser(id=7, email="shopper@example.com")


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest.fixture
def app():
    """Application serving a fresh in-memory database."""
    return create_app(Database(MEMORY_DB_URL))


@pytest.fixture
def client(app):
    """TestClient with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client: TestClient, email: str = "ada@example.com",
                       password: str = "correct-horse", name: str = "Ada") -> tuple[dict, dict]:
    """Register a user, log in, return (auth headers, public user)."""
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


@pytest.fixture
def auth(client):
    """(headers, user) for a freshly registered and logged-in user."""
    return register_and_login(client)


@pytest.fixture
def login_as(client):
    """Factory: login_as(email=...) registers and logs in another user."""
    def _login_as(**kwargs):
        return register_and_login(client, **kwargs)
    return _login_as
