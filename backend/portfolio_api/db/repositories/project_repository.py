"""
Project repository for database operations.
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, cast, String
from sqlalchemy.orm import selectinload

from portfolio_api.db.repositories.base_repository import BaseRepository
from portfolio_api.models.project import Project


class ProjectRepository(BaseRepository[Project]):
    """Repository for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Project, session)

    def _base_query(self):
        """Base query with eager loading of author relationship."""
        return (
            select(Project)
            .options(selectinload(Project.author))
            .execution_options(populate_existing=True)
        )

    def _filters(
        self,
        active_only: bool,
        featured_only: bool = False,
        search: Optional[str] = None,
        search_technologies: bool = True,
    ) -> list:
        conditions = []
        if active_only:
            conditions.append(Project.is_active.is_(True))
        if featured_only:
            conditions.append(Project.is_featured.is_(True))
        if search:
            fields = [
                Project.title.icontains(search, autoescape=True),
                Project.description.icontains(search, autoescape=True),
            ]
            if search_technologies:
                fields.append(cast(Project.technologies, String).icontains(search, autoescape=True))
            conditions.append(or_(*fields))
        return conditions

    async def get(self, id: UUID) -> Optional[Project]:
        """Get project by ID with author relationship loaded."""
        result = await self.session.execute(self._base_query().where(Project.id == id))
        return result.scalar_one_or_none()

    async def get_active(self, id: UUID) -> Optional[Project]:
        """Get a project only if it has not been soft-deleted."""
        result = await self.session.execute(
            self._base_query().where(Project.id == id).where(Project.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        skip: int = 0,
        limit: int = 10,
        active_only: bool = True,
        featured_only: bool = False,
        search: Optional[str] = None,
        search_technologies: bool = True,
    ) -> List[Project]:
        """List projects, featured first, then by display order, newest first."""
        query = (
            self._base_query()
            .where(*self._filters(active_only, featured_only, search, search_technologies))
            .order_by(
                Project.is_featured.desc(),
                Project.display_order.asc(),
                Project.created_at.desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_filtered(
        self,
        active_only: bool = True,
        featured_only: bool = False,
        search: Optional[str] = None,
        search_technologies: bool = True,
    ) -> int:
        return await self.count(
            *self._filters(active_only, featured_only, search, search_technologies)
        )

    async def list_featured(self) -> List[Project]:
        """List active featured projects by display order."""
        query = (
            self._base_query()
            .where(*self._filters(active_only=True, featured_only=True))
            .order_by(Project.display_order.asc(), Project.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
