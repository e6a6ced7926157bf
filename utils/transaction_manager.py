import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit, session_rollback
from exceptions.base import StorageException
from exceptions.storage import StorageTimeoutException

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Utility class for running store operations as bounded-time atomic transactions.

    Everything executed inside atomic_transaction() is committed together or
    rolled back together. A reader on another session therefore sees either
    the full state before or the full state after the block.
    """

    @staticmethod
    @asynccontextmanager
    async def atomic_transaction(session: AsyncSession,
                                 timeout: Optional[float] = None) -> AsyncIterator[AsyncSession]:
        """
        Context manager for atomic database transactions with timeout protection.

        Usage:
            async with TransactionManager.atomic_transaction(session):
                await session.execute(delete(...))
                session.add(...)

        Raises:
            StorageTimeoutException: If the block (including commit) exceeds the timeout
            StorageException: On any SQLAlchemy error; the original is chained as __cause__
        """
        timeout = timeout or config.STORE_TIMEOUT_SECONDS
        transaction_start = datetime.now()

        try:
            async with asyncio.timeout(timeout):
                yield session
                await session_commit(session)
            duration = (datetime.now() - transaction_start).total_seconds()
            logger.debug(f"Transaction committed successfully in {duration:.3f}s")
        except TimeoutError as e:
            await TransactionManager._rollback(session, e)
            logger.error(f"Transaction exceeded timeout of {timeout}s, rolled back")
            raise StorageTimeoutException(timeout) from e
        except SQLAlchemyError as e:
            await TransactionManager._rollback(session, e)
            logger.error(f"Transaction failed: {type(e).__name__}: {e}")
            raise StorageException() from e
        except Exception as e:
            await TransactionManager._rollback(session, e)
            raise

    @staticmethod
    async def _rollback(session: AsyncSession, reason: BaseException) -> None:
        try:
            await session_rollback(session)
            logger.info(f"Transaction rolled back due to error: {type(reason).__name__}")
        except Exception as rollback_error:
            logger.critical(f"Failed to rollback transaction: {str(rollback_error)}")
