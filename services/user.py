import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions.base import ForbiddenException
from exceptions.user import UserNotFoundException
from models.user import UserProfileDTO
from repositories.user import UserRepository
from services.auth import AuthenticatedUser
from utils.cart_validation import parse_positive_int

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "username", "bio", "location", "website")


class UserService:

    @staticmethod
    def _check_owner(caller: AuthenticatedUser, user_id) -> int:
        user_id = parse_positive_int(user_id, "userId")
        if caller.id != user_id:
            logger.warning(f"[Profile] User {caller.id} tried to access profile {user_id}")
            raise ForbiddenException()
        return user_id

    @staticmethod
    async def get_profile(caller: AuthenticatedUser, user_id, session: AsyncSession) -> UserProfileDTO:
        user_id = UserService._check_owner(caller, user_id)
        user = await UserRepository.get_by_id(user_id, session)
        match user:
            case None:
                raise UserNotFoundException(user_id)
            case _:
                return UserProfileDTO(**user.model_dump(include={"id", "name", "email", *PROFILE_FIELDS}))

    @staticmethod
    async def update_profile(caller: AuthenticatedUser, user_id, data: dict, session: AsyncSession) -> None:
        """
        Overwrite the editable profile fields.

        Every field is trimmed; a missing field is stored as an empty string.

        Raises:
            ForbiddenException: caller is not the profile owner
            UserNotFoundException: no row was updated
        """
        user_id = UserService._check_owner(caller, user_id)
        profile = {}
        for field in PROFILE_FIELDS:
            value = data.get(field)
            profile[field] = value.strip() if isinstance(value, str) else ""

        updated = await UserRepository.update_profile(user_id, profile, session)
        if not updated:
            raise UserNotFoundException(user_id)
        logger.info(f"[Profile] User {user_id} updated profile")
