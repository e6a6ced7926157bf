import logging

from sqlalchemy.ext.asyncio import AsyncSession

from exceptions.base import ValidationException
from models.contact import ContactDTO
from repositories.contact import ContactRepository

logger = logging.getLogger(__name__)


class ContactService:

    @staticmethod
    async def submit(name, email, message, session: AsyncSession) -> int:
        fields = {"name": name, "email": email, "message": message}
        for field, value in fields.items():
            if not isinstance(value, str) or not value.strip():
                raise ValidationException("All fields are required", field=field)

        contact_id = await ContactRepository.create(
            ContactDTO(**{field: value.strip() for field, value in fields.items()}), session
        )
        logger.info(f"[Contact] Message {contact_id} received")
        return contact_id
