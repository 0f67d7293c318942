"""
Project service with business logic.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.exceptions import NotFoundError
from portfolio_api.core.logging import get_logger
from portfolio_api.db.repositories.project_repository import ProjectRepository
from portfolio_api.models.project import Project
from portfolio_api.schemas.project import (
    AuthorSummary,
    ProjectCreate,
    ProjectFeatureState,
    ProjectResponse,
    ProjectUpdate,
)
from portfolio_api.services.base_service import BaseService

logger = get_logger(__name__)

# Columns a PUT may clear by sending null
NULLABLE_FIELDS = {"video_url", "video_title", "repository_url"}


class ProjectService(BaseService):
    """Service for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.project_repo = ProjectRepository(session)

    async def create_project(self, project_data: ProjectCreate, author_id: UUID) -> ProjectResponse:
        """Create a new project authored by ``author_id``."""
        project_dict = project_data.model_dump(mode="json")
        project = await self.project_repo.create(author_id=author_id, **project_dict)
        await self.commit()
        # Reload with author relationship
        project = await self.project_repo.get(project.id)
        logger.info("Project created", extra={"project_id": str(project.id)})
        return self._to_response(project)

    async def get_public_project(self, project_id: UUID) -> ProjectResponse:
        """Get an active project; soft-deleted ones are reported missing."""
        project = await self.project_repo.get_active(project_id)
        if not project:
            raise NotFoundError("Project not found")
        return self._to_response(project)

    async def list_projects(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        featured_only: bool = False,
        include_inactive: bool = False,
    ) -> tuple[List[ProjectResponse], int]:
        """
        List projects for one page.

        Public listings search tags as well as title and description;
        the admin listing (include_inactive) searches title and description only.
        """
        filters = dict(
            active_only=not include_inactive,
            featured_only=featured_only,
            search=search or None,
            search_technologies=not include_inactive,
        )
        projects = await self.project_repo.list_filtered(
            skip=(page - 1) * limit,
            limit=limit,
            **filters,
        )
        total = await self.project_repo.count_filtered(**filters)
        return [self._to_response(project) for project in projects], total

    async def list_featured(self) -> List[ProjectResponse]:
        projects = await self.project_repo.list_featured()
        return [self._to_response(project) for project in projects]

    async def update_project(self, project_id: UUID, project_data: ProjectUpdate) -> ProjectResponse:
        """Apply a partial update."""
        update_dict = {
            key: value
            for key, value in project_data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        project = await self.project_repo.update(project_id, **update_dict)
        if not project:
            raise NotFoundError("Project not found")
        await self.commit()
        return self._to_response(project)

    async def soft_delete_project(self, project_id: UUID) -> None:
        """Hide a project from public listings without removing it."""
        project = await self.project_repo.update(project_id, is_active=False)
        if not project:
            raise NotFoundError("Project not found")
        await self.commit()
        logger.info("Project deactivated", extra={"project_id": str(project_id)})

    async def toggle_featured(self, project_id: UUID) -> ProjectFeatureState:
        """Flip is_featured and report the resulting value."""
        project = await self.project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found")
        project = await self.project_repo.update(project_id, is_featured=not project.is_featured)
        await self.commit()
        return ProjectFeatureState(
            id=project.id,
            title=project.title,
            is_featured=project.is_featured,
        )

    def _to_response(self, project: Project) -> ProjectResponse:
        """Convert project model to response schema."""
        author = None
        if project.author is not None:
            author = AuthorSummary(id=project.author.id, name=project.author.name)

        return ProjectResponse(
            id=project.id,
            title=project.title,
            description=project.description,
            video_url=project.video_url,
            video_title=project.video_title,
            repository_url=project.repository_url,
            technologies=list(project.technologies or []),
            is_featured=project.is_featured,
            is_active=project.is_active,
            display_order=project.display_order,
            author=author,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
