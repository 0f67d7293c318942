"""
Database handle with async SQLAlchemy 2.0.
Owns the engine and sessionmaker; constructed once at startup and
handed to the components that need it.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from portfolio_api.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """Explicitly managed connection pool and session factory."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self.engine: Optional[AsyncEngine] = None
        self.session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    async def connect(self) -> None:
        """Create the engine and verify the database answers."""
        if self.engine is not None:
            return

        engine_kwargs = dict(self.engine_kwargs)
        if not self.url.startswith("sqlite"):
            # Pool sizing does not apply to SQLite's single-connection pools
            engine_kwargs.setdefault("pool_size", 5)
            engine_kwargs.setdefault("max_overflow", 10)
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine = create_async_engine(self.url, echo=self.echo, **engine_kwargs)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        logger.info(
            "Database connected",
            extra={"dialect": self.engine.dialect.name},
        )

    async def disconnect(self) -> None:
        """Close database connections."""
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_maker = None
        logger.info("Database connections closed")

    async def ping(self) -> Optional[float]:
        """
        Round-trip a trivial query.

        Returns:
            Response time in milliseconds, or None if the database is unreachable
        """
        if self.engine is None:
            return None
        started = time.perf_counter()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return None
        return (time.perf_counter() - started) * 1000

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session that commits on success and rolls back on error.
        """
        if self.session_maker is None:
            raise RuntimeError("Database is not connected")

        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session.
    Resolves the Database owned by the application's container.
    """
    database: Database = request.app.state.container.database()
    async with database.session() as session:
        yield session
