"""
Background task that periodically removes expired refresh tokens.
"""

import asyncio
from contextlib import suppress
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio_api.core.logging import get_logger
from portfolio_api.db.session import Database
from portfolio_api.services.token_service import TokenService

logger = get_logger(__name__)


class TokenSweeper:
    """
    Owns a single asyncio task that sweeps expired refresh tokens every
    ``interval_seconds``. Started and stopped by the application lifespan.
    """

    def __init__(self, database: Database, interval_seconds: float = 3600):
        self.database = database
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="refresh-token-sweeper")
        logger.info(
            "Refresh token sweeper started",
            extra={"interval_seconds": self.interval_seconds},
        )

    async def stop(self) -> None:
        """Cancel the task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Refresh token sweeper stopped")

    async def sweep_once(self) -> int:
        async with self.database.session() as session:
            return await TokenService(session).sweep_expired()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.sweep_once()
            except SQLAlchemyError:
                # retried on the next tick
                logger.exception("Refresh token sweep failed")
