"""
Project API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.api.middleware import optional_authentication, require_admin
from portfolio_api.controllers.project_controller import ProjectController
from portfolio_api.db.session import get_db
from portfolio_api.models.account import Account
from portfolio_api.schemas.common import ApiResponse
from portfolio_api.schemas.project import (
    FeaturedProjectsData,
    ProjectCreate,
    ProjectData,
    ProjectFeatureData,
    ProjectListData,
    ProjectUpdate,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[ProjectListData])
async def list_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    featured: bool = Query(False),
    current_account: Optional[Account] = Depends(optional_authentication),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectListData]:
    """List active projects, featured first."""
    controller = ProjectController(db)
    return await controller.list_projects(
        page=page,
        limit=limit,
        search=search,
        featured_only=featured,
    )


@router.get("/featured", response_model=ApiResponse[FeaturedProjectsData])
async def list_featured_projects(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[FeaturedProjectsData]:
    controller = ProjectController(db)
    return await controller.list_featured()


@router.get("/admin/all", response_model=ApiResponse[ProjectListData])
async def list_all_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectListData]:
    """List every project, including soft-deleted ones."""
    controller = ProjectController(db)
    return await controller.list_projects(
        page=page,
        limit=limit,
        search=search,
        include_inactive=True,
    )


@router.get("/{project_id}", response_model=ApiResponse[ProjectData])
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectData]:
    """Get project by ID."""
    controller = ProjectController(db)
    return await controller.get_project(project_id)


@router.post("", response_model=ApiResponse[ProjectData], status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectData]:
    """Create a new project."""
    controller = ProjectController(db)
    return await controller.create_project(project_data, author_id=admin.id)


@router.put("/{project_id}", response_model=ApiResponse[ProjectData])
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectData]:
    """Update a project."""
    controller = ProjectController(db)
    return await controller.update_project(project_id, project_data)


@router.delete("/{project_id}", response_model=ApiResponse[None])
async def delete_project(
    project_id: UUID,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """Soft delete a project."""
    controller = ProjectController(db)
    return await controller.delete_project(project_id)


@router.patch("/{project_id}/toggle-featured", response_model=ApiResponse[ProjectFeatureData])
async def toggle_project_featured(
    project_id: UUID,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProjectFeatureData]:
    controller = ProjectController(db)
    return await controller.toggle_featured(project_id)
