"""
Unit Tests: AuthService

Tests for services/auth.py: register, login, refresh, authenticate.
"""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

import config
from enums.token_type import TokenType
from exceptions.auth import InvalidCredentialsException, InvalidTokenException, MissingTokenException
from exceptions.base import ValidationException, StorageException
from exceptions.storage import StorageTimeoutException
from exceptions.user import EmailAlreadyRegisteredException
from repositories.user import UserRepository
from services.auth import AuthService
from utils.token_signer import issue_token


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_trims_and_hashes(self, test_session):
        user_id = await AuthService.register("  Ada ", " ada@example.com ", "correct-horse", test_session)

        user = await UserRepository.get_by_id(user_id, test_session)
        assert user.name == "Ada"
        assert user.email == "ada@example.com"
        assert user.password != "correct-horse"
        assert user.password.startswith("pbkdf2_sha256$")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, test_session):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)

        with pytest.raises(EmailAlreadyRegisteredException):
            await AuthService.register("Other", "ada@example.com", "another-pass", test_session)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,email,password", [
        ("", "a@example.com", "pw"),
        ("Ada", "   ", "pw"),
        ("Ada", "a@example.com", ""),
        (None, "a@example.com", "pw"),
    ])
    async def test_missing_fields_rejected(self, test_session, name, email, password):
        with pytest.raises(ValidationException):
            await AuthService.register(name, email, password, test_session)


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token_pair(self, test_session):
        user_id = await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)

        pair = await AuthService.login("ada@example.com", "correct-horse", test_session)

        assert pair.user.id == user_id
        assert pair.user.name == "Ada"
        assert pair.access_token != pair.refresh_token
        assert AuthService.authenticate(pair.access_token).id == user_id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, test_session):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)

        with pytest.raises(InvalidCredentialsException) as wrong_password:
            await AuthService.login("ada@example.com", "wrong", test_session)
        with pytest.raises(InvalidCredentialsException) as unknown_email:
            await AuthService.login("bob@example.com", "correct-horse", test_session)

        assert wrong_password.value.message == unknown_email.value.message


class TestRefreshAndAuthenticate:

    @pytest.mark.asyncio
    async def test_refresh_rotates_tokens(self, test_session):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)
        pair = await AuthService.login("ada@example.com", "correct-horse", test_session)

        refreshed = await AuthService.refresh(pair.refresh_token, test_session)

        assert refreshed.user == pair.user
        assert AuthService.authenticate(refreshed.access_token).id == pair.user.id

    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, test_session):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)
        pair = await AuthService.login("ada@example.com", "correct-horse", test_session)

        with pytest.raises(InvalidTokenException):
            await AuthService.refresh(pair.access_token, test_session)

    @pytest.mark.asyncio
    async def test_refresh_for_deleted_user_rejected(self, test_session):
        token = issue_token(999, "ghost@example.com", TokenType.REFRESH,
                            config.REFRESH_TOKEN_SECRET, config.REFRESH_TOKEN_EXPIRES_SECONDS)

        with pytest.raises(InvalidTokenException):
            await AuthService.refresh(token, test_session)

    @pytest.mark.asyncio
    async def test_missing_refresh_token(self, test_session):
        with pytest.raises(MissingTokenException):
            await AuthService.refresh(None, test_session)

    def test_refresh_token_is_not_an_access_token(self):
        token = issue_token(1, "ada@example.com", TokenType.REFRESH,
                            config.REFRESH_TOKEN_SECRET, config.REFRESH_TOKEN_EXPIRES_SECONDS)

        with pytest.raises(InvalidTokenException):
            AuthService.authenticate(token)

    def test_missing_access_token(self):
        with pytest.raises(MissingTokenException):
            AuthService.authenticate("")


class TestUserReads:
    """User lookups are bounded and map storage failures like the cart store."""

    @pytest.mark.asyncio
    async def test_storage_error_becomes_storage_exception(self, test_session, monkeypatch):
        async def broken_execute(stmt, session):
            raise OperationalError("SELECT users", {}, Exception("database is locked"))

        monkeypatch.setattr("repositories.user.session_execute", broken_execute)

        with pytest.raises(StorageException):
            await UserRepository.get_by_email("shopper@example.com", test_session)

    @pytest.mark.asyncio
    async def test_slow_lookup_times_out(self, test_session, monkeypatch):
        monkeypatch.setattr(config, "STORE_TIMEOUT_SECONDS", 0.05)

        async def slow_execute(stmt, session):
            await asyncio.sleep(1)

        monkeypatch.setattr("repositories.user.session_execute", slow_execute)

        with pytest.raises(StorageTimeoutException):
            await UserRepository.get_by_id(1, test_session)
