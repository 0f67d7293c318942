"""
Base service class.
Services hold the business rules for one request's unit of work and
raise AppException subclasses that the API layer renders.
"""

from abc import ABC
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService(ABC):
    """Base service class for all services."""

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def commit(self) -> None:
        """Commit the work done through this service's repositories."""
        await self.session.commit()
