import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

import config
from enums.token_type import TokenType
from exceptions.auth import InvalidCredentialsException, InvalidTokenException, MissingTokenException
from exceptions.base import ValidationException
from models.user import UserDTO, PublicUserDTO
from repositories.user import UserRepository
from utils.password_hasher import hash_password, verify_password
from utils.token_signer import issue_token, verify_token, TokenValidationError

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Identity carried by a verified access token."""
    id: int
    email: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    user: PublicUserDTO


def _required(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("All fields are required", field=field)
    return value.strip()


class AuthService:

    @staticmethod
    async def register(name: str, email: str, password: str, session: AsyncSession) -> int:
        """
        Create a user with a hashed password.

        Raises:
            ValidationException: A field is missing or blank
            EmailAlreadyRegisteredException: Email is taken
        """
        name = _required(name, "name")
        email = _required(email, "email")
        # Passwords are not trimmed, only checked for content
        if not isinstance(password, str) or not password.strip():
            raise ValidationException("All fields are required", field="password")

        user_id = await UserRepository.create(
            UserDTO(name=name, email=email, password=hash_password(password)), session
        )
        logger.info(f"[Auth] Registered user {user_id}")
        return user_id

    @staticmethod
    async def login(email: str, password: str, session: AsyncSession) -> TokenPair:
        if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
            raise ValidationException("Email and password are required", field="email")

        user = await UserRepository.get_by_email(email.strip(), session)
        if user is None or not verify_password(password, user.password):
            logger.warning("[Auth] Failed login attempt")
            raise InvalidCredentialsException()

        logger.info(f"[Auth] User {user.id} logged in")
        return AuthService._issue_pair(user)

    @staticmethod
    async def refresh(refresh_token: str | None, session: AsyncSession) -> TokenPair:
        """
        Exchange a refresh token for a new token pair.

        The user is reloaded so a deleted account cannot keep refreshing.
        """
        if not refresh_token:
            raise MissingTokenException()
        try:
            claims = verify_token(refresh_token, TokenType.REFRESH, config.REFRESH_TOKEN_SECRET)
        except TokenValidationError as e:
            raise InvalidTokenException(str(e)) from e

        user = await UserRepository.get_by_id(claims['sub'], session)
        if user is None:
            raise InvalidTokenException("User no longer exists")
        return AuthService._issue_pair(user)

    @staticmethod
    def authenticate(access_token: str | None) -> AuthenticatedUser:
        if not access_token:
            raise MissingTokenException()
        try:
            claims = verify_token(access_token, TokenType.ACCESS, config.ACCESS_TOKEN_SECRET)
        except TokenValidationError as e:
            raise InvalidTokenException(str(e)) from e
        return AuthenticatedUser(id=claims['sub'], email=claims.get('email') or "")

    @staticmethod
    def _issue_pair(user: UserDTO) -> TokenPair:
        access_token = issue_token(user.id, user.email, TokenType.ACCESS,
                                   config.ACCESS_TOKEN_SECRET, config.ACCESS_TOKEN_EXPIRES_SECONDS)
        refresh_token = issue_token(user.id, user.email, TokenType.REFRESH,
                                    config.REFRESH_TOKEN_SECRET, config.REFRESH_TOKEN_EXPIRES_SECONDS)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            user=PublicUserDTO(id=user.id, name=user.name, email=user.email),
        )
