"""
API router for the storefront.

Routes:
    GET    /api/health
    POST   /api/auth/register | login | refresh | logout
    GET    /api/auth/verify
    GET    /api/user/{user_id}
    PUT    /api/user/{user_id}
    POST   /api/contact
    GET    /api/cart                     full snapshot
    POST   /api/cart                     additive upsert of one line
    PUT    /api/cart                     replace the whole cart
    DELETE /api/cart                     clear
    PUT    /api/cart/{product_id}        set quantity
    DELETE /api/cart/{product_id}        remove one line

Every cart route requires a bearer token and answers with the full snapshot
{"items": [...]}. Failures are raised as service exceptions and rendered by
utils/error_handler.py as {"error", "code"}.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import Database
from services.auth import AuthService, AuthenticatedUser, TokenPair
from services.cart import CartService
from services.contact import ContactService
from services.user import UserService
from web.dependencies import get_database, get_session, get_current_user

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api", tags=["api"])


class RegisterPayload(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginPayload(BaseModel):
    email: str | None = None
    password: str | None = None


class ContactPayload(BaseModel):
    name: str | None = None
    email: str | None = None
    message: str | None = None


class ReplaceCartPayload(BaseModel):
    """Lines are validated by the cart store, not by the schema."""
    items: list[Any]


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=config.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=config.REFRESH_TOKEN_EXPIRES_SECONDS,
        httponly=True,
        secure=config.SECURE_COOKIES,
        samesite="strict",
        path="/",
    )


def token_response(response: Response, pair: TokenPair) -> dict:
    set_refresh_cookie(response, pair.refresh_token)
    return {"token": pair.access_token, "user": pair.user.model_dump()}


@api_router.get("/health")
async def health(database: Database = Depends(get_database)):
    healthy = await database.is_healthy()
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "db": "Connected" if healthy else "Disconnected",
    }


# Auth

@api_router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterPayload, session: AsyncSession = Depends(get_session)):
    user_id = await AuthService.register(payload.name, payload.email, payload.password, session)
    return {"message": "User registered successfully", "userId": user_id}


@api_router.post("/auth/login")
async def login(payload: LoginPayload, response: Response, session: AsyncSession = Depends(get_session)):
    pair = await AuthService.login(payload.email, payload.password, session)
    return token_response(response, pair)


@api_router.post("/auth/refresh")
async def refresh(request: Request, response: Response, session: AsyncSession = Depends(get_session)):
    pair = await AuthService.refresh(request.cookies.get(config.REFRESH_COOKIE_NAME), session)
    return token_response(response, pair)


@api_router.post("/auth/logout")
async def logout(response: Response):
    response.delete_cookie(
        key=config.REFRESH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=config.SECURE_COOKIES,
        samesite="strict",
    )
    return {"message": "Logged out successfully"}


@api_router.get("/auth/verify")
async def verify(user: AuthenticatedUser = Depends(get_current_user),
                 session: AsyncSession = Depends(get_session)):
    profile = await UserService.get_profile(user, user.id, session)
    return {"user": {"id": profile.id, "name": profile.name, "email": profile.email}}


# Profile & contact

@api_router.get("/user/{user_id}")
async def get_profile(user_id: str,
                      user: AuthenticatedUser = Depends(get_current_user),
                      session: AsyncSession = Depends(get_session)):
    profile = await UserService.get_profile(user, user_id, session)
    return profile.model_dump()


@api_router.put("/user/{user_id}")
async def update_profile(user_id: str,
                         payload: dict[str, Any] = Body(...),
                         user: AuthenticatedUser = Depends(get_current_user),
                         session: AsyncSession = Depends(get_session)):
    await UserService.update_profile(user, user_id, payload, session)
    return {"message": "Profile updated successfully"}


@api_router.post("/contact")
async def contact(payload: ContactPayload,
                  user: AuthenticatedUser = Depends(get_current_user),
                  session: AsyncSession = Depends(get_session)):
    contact_id = await ContactService.submit(payload.name, payload.email, payload.message, session)
    return {"message": "Message received successfully", "contactId": contact_id}


# Cart

@api_router.get("/cart")
async def get_cart(user: AuthenticatedUser = Depends(get_current_user),
                   session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.fetch(user, session)
    return snapshot.model_dump(by_alias=True)


@api_router.post("/cart")
async def upsert_cart_item(payload: dict[str, Any] = Body(...),
                           user: AuthenticatedUser = Depends(get_current_user),
                           session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.upsert(user, payload, session)
    return snapshot.model_dump(by_alias=True)


@api_router.put("/cart")
async def replace_cart(payload: ReplaceCartPayload,
                       user: AuthenticatedUser = Depends(get_current_user),
                       session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.replace(user, payload.items, session)
    return snapshot.model_dump(by_alias=True)


@api_router.delete("/cart")
async def clear_cart(user: AuthenticatedUser = Depends(get_current_user),
                     session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.clear(user, session)
    return snapshot.model_dump(by_alias=True)


@api_router.put("/cart/{product_id}")
async def set_cart_item_quantity(product_id: str,
                                 payload: dict[str, Any] = Body(...),
                                 user: AuthenticatedUser = Depends(get_current_user),
                                 session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.set_quantity(user, product_id, payload.get("quantity"), session)
    return snapshot.model_dump(by_alias=True)


@api_router.delete("/cart/{product_id}")
async def remove_cart_item(product_id: str,
                           user: AuthenticatedUser = Depends(get_current_user),
                           session: AsyncSession = Depends(get_session)):
    snapshot = await CartService.remove(user, product_id, session)
    return snapshot.model_dump(by_alias=True)
