from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, Text, DateTime, func

from models.base import Base


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now())


class ContactDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    email: str | None = None
    message: str | None = None
    created_at: datetime | None = None
