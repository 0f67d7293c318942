"""
Project Pydantic schemas for request/response validation.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, HttpUrl, field_validator

from portfolio_api.schemas.common import CamelModel, Pagination, RequestModel

VIDEO_HOSTS = ("youtube.com", "youtu.be")


def _check_video_host(url: Optional[HttpUrl]) -> Optional[HttpUrl]:
    if url is None:
        return url
    host = (url.host or "").lower()
    if not any(host == allowed or host.endswith("." + allowed) for allowed in VIDEO_HOSTS):
        raise ValueError("Only YouTube video URLs are allowed")
    return url


def _check_technologies(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return values
    cleaned = [value.strip() for value in values]
    if any(not value for value in cleaned):
        raise ValueError("Every technology must be a non-empty string")
    return cleaned


class ProjectCreate(RequestModel):
    """Schema for creating a project."""
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    video_url: Optional[HttpUrl] = None
    video_title: Optional[str] = Field(None, max_length=100)
    repository_url: Optional[HttpUrl] = None
    technologies: List[str] = Field(..., min_length=1)
    is_featured: bool = False
    display_order: int = Field(0, ge=0, alias="order")

    @field_validator("video_url")
    @classmethod
    def video_on_allowed_host(cls, value):
        return _check_video_host(value)

    @field_validator("technologies")
    @classmethod
    def technologies_not_blank(cls, value):
        return _check_technologies(value)


class ProjectUpdate(RequestModel):
    """Schema for updating a project (all fields optional)."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    video_url: Optional[HttpUrl] = None
    video_title: Optional[str] = Field(None, max_length=100)
    repository_url: Optional[HttpUrl] = None
    technologies: Optional[List[str]] = Field(None, min_length=1)
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0, alias="order")

    @field_validator("video_url")
    @classmethod
    def video_on_allowed_host(cls, value):
        return _check_video_host(value)

    @field_validator("technologies")
    @classmethod
    def technologies_not_blank(cls, value):
        return _check_technologies(value)


class AuthorSummary(CamelModel):
    id: UUID
    name: str


class ProjectResponse(CamelModel):
    """Schema for project response."""
    id: UUID
    title: str
    description: str
    video_url: Optional[str] = None
    video_title: Optional[str] = None
    repository_url: Optional[str] = None
    technologies: List[str]
    is_featured: bool
    is_active: bool
    display_order: int = Field(0, alias="order")
    author: Optional[AuthorSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectData(CamelModel):
    project: ProjectResponse


class ProjectListData(CamelModel):
    """Schema for project list response."""
    projects: List[ProjectResponse]
    pagination: Pagination


class FeaturedProjectsData(CamelModel):
    projects: List[ProjectResponse]


class ProjectFeatureState(CamelModel):
    id: UUID
    title: str
    is_featured: bool


class ProjectFeatureData(CamelModel):
    project: ProjectFeatureState
