from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from exceptions.base import StorageException
from exceptions.user import EmailAlreadyRegisteredException
from models.user import UserDTO, User
from utils.transaction_manager import TransactionManager


class UserRepository:
    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.id == user_id)
        async with TransactionManager.atomic_transaction(session):
            user = await session_execute(stmt, session)
            user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def get_by_email(email: str, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.email == email)
        async with TransactionManager.atomic_transaction(session):
            user = await session_execute(stmt, session)
            user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def create(user_dto: UserDTO, session: AsyncSession) -> int:
        """
        Insert a user in its own transaction.

        Raises:
            EmailAlreadyRegisteredException: unique index on email rejected the row
        """
        user = User(**user_dto.model_dump(exclude_none=True))
        try:
            async with TransactionManager.atomic_transaction(session):
                session.add(user)
                await session_flush(session)
        except StorageException as e:
            if isinstance(e.__cause__, IntegrityError):
                raise EmailAlreadyRegisteredException(user_dto.email) from e.__cause__
            raise
        return user.id

    @staticmethod
    async def update_profile(user_id: int, profile: dict, session: AsyncSession) -> bool:
        """Returns False if no row matched user_id."""
        stmt = update(User).where(User.id == user_id).values(**profile)
        async with TransactionManager.atomic_transaction(session):
            result = await session_execute(stmt, session)
        return result.rowcount > 0
