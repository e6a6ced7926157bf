"""
Unit Tests: UserService and ContactService

Tests for services/user.py (ownership, trimming) and services/contact.py.
"""

import pytest

from exceptions.base import ForbiddenException, ValidationException
from exceptions.user import UserNotFoundException
from services.auth import AuthService, AuthenticatedUser
from services.contact import ContactService
from services.user import UserService


@pytest.fixture
def caller():
    return AuthenticatedUser(id=1, email="ada@example.com")


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_own_profile(self, test_session, caller):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)

        profile = await UserService.get_profile(caller, "1", test_session)

        assert profile.id == 1
        assert profile.email == "ada@example.com"
        assert not hasattr(profile, "password")

    @pytest.mark.asyncio
    async def test_other_users_profile_forbidden(self, test_session, caller):
        with pytest.raises(ForbiddenException):
            await UserService.get_profile(caller, 2, test_session)

    @pytest.mark.asyncio
    async def test_invalid_id_rejected(self, test_session, caller):
        with pytest.raises(ValidationException):
            await UserService.get_profile(caller, "abc", test_session)

    @pytest.mark.asyncio
    async def test_missing_user(self, test_session, caller):
        with pytest.raises(UserNotFoundException):
            await UserService.get_profile(caller, 1, test_session)

    @pytest.mark.asyncio
    async def test_update_trims_and_blanks_missing_fields(self, test_session, caller):
        await AuthService.register("Ada", "ada@example.com", "correct-horse", test_session)

        await UserService.update_profile(caller, 1, {"name": " Ada L. ", "bio": "  math  "}, test_session)

        profile = await UserService.get_profile(caller, 1, test_session)
        assert profile.name == "Ada L."
        assert profile.bio == "math"
        assert profile.username == ""
        assert profile.website == ""

    @pytest.mark.asyncio
    async def test_update_missing_user(self, test_session, caller):
        with pytest.raises(UserNotFoundException):
            await UserService.update_profile(caller, 1, {"name": "Ghost"}, test_session)


class TestContact:

    @pytest.mark.asyncio
    async def test_submit_returns_id(self, test_session):
        contact_id = await ContactService.submit(" Ada ", "ada@example.com", " Hello ", test_session)
        assert contact_id == 1

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, test_session):
        with pytest.raises(ValidationException):
            await ContactService.submit("Ada", "ada@example.com", "   ", test_session)
