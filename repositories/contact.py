from sqlalchemy.ext.asyncio import AsyncSession

from db import session_flush
from models.contact import Contact, ContactDTO
from utils.transaction_manager import TransactionManager


class ContactRepository:
    @staticmethod
    async def create(contact_dto: ContactDTO, session: AsyncSession) -> int:
        contact = Contact(**contact_dto.model_dump(exclude_none=True))
        async with TransactionManager.atomic_transaction(session):
            session.add(contact)
            await session_flush(session)
        return contact.id
