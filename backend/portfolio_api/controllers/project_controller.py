"""
Project controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.controllers.base_controller import BaseController
from portfolio_api.schemas.common import ApiResponse, Pagination
from portfolio_api.schemas.project import (
    FeaturedProjectsData,
    ProjectCreate,
    ProjectData,
    ProjectFeatureData,
    ProjectListData,
    ProjectUpdate,
)
from portfolio_api.services.project_service import ProjectService


class ProjectController(BaseController):
    """Controller for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.project_service = ProjectService(session)

    async def create_project(self, project_data: ProjectCreate, author_id: UUID) -> ApiResponse[ProjectData]:
        """Create a new project."""
        project = await self.project_service.create_project(project_data, author_id)
        return ApiResponse[ProjectData](
            message="Project created successfully",
            data=ProjectData(project=project),
        )

    async def get_project(self, project_id: UUID) -> ApiResponse[ProjectData]:
        """Get an active project by ID."""
        project = await self.project_service.get_public_project(project_id)
        return ApiResponse[ProjectData](data=ProjectData(project=project))

    async def list_projects(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        featured_only: bool = False,
        include_inactive: bool = False,
    ) -> ApiResponse[ProjectListData]:
        """List projects with pagination."""
        projects, total = await self.project_service.list_projects(
            page=page,
            limit=limit,
            search=search,
            featured_only=featured_only,
            include_inactive=include_inactive,
        )
        return ApiResponse[ProjectListData](
            data=ProjectListData(
                projects=projects,
                pagination=Pagination.build(page, limit, total),
            )
        )

    async def list_featured(self) -> ApiResponse[FeaturedProjectsData]:
        projects = await self.project_service.list_featured()
        return ApiResponse[FeaturedProjectsData](data=FeaturedProjectsData(projects=projects))

    async def update_project(self, project_id: UUID, project_data: ProjectUpdate) -> ApiResponse[ProjectData]:
        """Update a project."""
        project = await self.project_service.update_project(project_id, project_data)
        return ApiResponse[ProjectData](
            message="Project updated successfully",
            data=ProjectData(project=project),
        )

    async def delete_project(self, project_id: UUID) -> ApiResponse[None]:
        """Soft delete a project."""
        await self.project_service.soft_delete_project(project_id)
        return ApiResponse[None](message="Project deleted successfully")

    async def toggle_featured(self, project_id: UUID) -> ApiResponse[ProjectFeatureData]:
        state = await self.project_service.toggle_featured(project_id)
        verb = "featured" if state.is_featured else "unfeatured"
        return ApiResponse[ProjectFeatureData](
            message=f"Project {verb} successfully",
            data=ProjectFeatureData(project=state),
        )
