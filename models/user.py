from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, DateTime, String, Text, func

from models.base import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    # Opaque credential hash (utils/password_hasher.py)
    password = Column(String, nullable=False)

    # Profile fields, all optional free text
    username = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String, nullable=True)

    created_at = Column(DateTime, default=func.now())


class UserDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    email: str | None = None
    password: str | None = None
    username: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    created_at: datetime | None = None


class PublicUserDTO(BaseModel):
    """User fields that may leave the server (never the credential hash)."""
    id: int
    name: str
    email: str


class UserProfileDTO(PublicUserDTO):
    username: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
