from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator
import logging

from sqlalchemy import event, Result, CursorResult, text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.pool import StaticPool

"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.base import Base
from models.user import User
from models.cartLine import CartLine
from models.contact import Contact

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide storage resource.

    Acquired once at application startup (see app.py lifespan), handed to
    request handlers through a dependency, disposed on shutdown. Nothing in
    the codebase reaches for a module-level engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_memory(self) -> bool:
        return ":memory:" in self.url or self.url.rstrip("/").endswith("sqlite+aiosqlite:")

    async def connect(self) -> None:
        if self.engine is not None:
            return

        if self.is_memory:
            # In-memory SQLite lives inside one connection; share it across sessions
            self.engine = create_async_engine(
                self.url,
                echo=self.echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self._ensure_data_folder()
            self.engine = create_async_engine(self.url, echo=self.echo)

        event.listen(self.engine.sync_engine, "connect", set_sqlite_pragma)
        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        await self.create_tables()
        logger.info(f"[DB] Connected to {self.engine.url.render_as_string(hide_password=True)}")

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_maker = None
        logger.info("[DB] Connection pool disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.session_maker is None:
            raise RuntimeError("Database.connect() must be awaited before opening sessions")
        async with self.session_maker() as session:
            yield session

    async def is_healthy(self) -> bool:
        if self.session_maker is None:
            return False
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"[DB] Health check failed: {e}")
            return False

    def _ensure_data_folder(self) -> None:
        # sqlite+aiosqlite:///data/storefront.db -> data/
        database = self.url.split("///", 1)[-1]
        if not database:
            return
        data_folder = Path(database).parent
        if data_folder.exists() is False:
            data_folder.mkdir(parents=True)


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    return await session.execute(stmt)


async def session_flush(session: AsyncSession) -> None:
    await session.flush()


async def session_commit(session: AsyncSession) -> None:
    await session.commit()


async def session_rollback(session: AsyncSession) -> None:
    await session.rollback()


def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
