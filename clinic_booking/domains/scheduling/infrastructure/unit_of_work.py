"""
SQLAlchemy Unit of Work
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import PersistenceException
from clinic_booking.domains.scheduling.application.ports import IUnitOfWork

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    Commits the session when the block succeeds and rolls it back otherwise.

    Repositories only flush, so everything written inside one
    ``transaction()`` block becomes visible together or not at all.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
        except BaseException:
            await self.session.rollback()
            raise

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Commit failed: {e}", exc_info=True)
            raise PersistenceException("commit", e) from e
