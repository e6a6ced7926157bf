"""
FastAPI dependencies shared by the API routes.

The Database resource is created in the application lifespan (app.py) and
stored on app.state; routes receive a scoped session per request and the
authenticated identity from the bearer token.
"""

from typing import AsyncIterator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from db import Database
from services.auth import AuthService, AuthenticatedUser


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_session(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def bearer_token(authorization: str | None) -> str | None:
    """Extract the credential from an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def get_current_user(authorization: str | None = Header(default=None)) -> AuthenticatedUser:
    """
    Resolve the caller from the bearer token.

    Raises:
        MissingTokenException: No usable Authorization header (401)
        InvalidTokenException: Signature, type or expiry check failed (401)
    """
    return AuthService.authenticate(bearer_token(authorization))
