"""Transaction scope over an AsyncSession."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class SqlUnitOfWork:
    """
    Commits the session when the atomic block exits cleanly, rolls back otherwise.

    Row locks taken inside the block (SELECT ... FOR UPDATE) are held until
    that commit or rollback.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
        except Exception:
            await self.db.rollback()
            logger.debug("Transaction rolled back")
            raise
        await self.db.commit()
