"""
Shared schema building blocks: camelCase models, the response envelope
and pagination metadata.
"""

import math
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class RequestModel(CamelModel):
    """Base schema for request bodies; unknown fields are rejected."""

    class Config:
        extra = "forbid"
        str_strip_whitespace = True


class ApiResponse(CamelModel, Generic[DataT]):
    """Uniform success envelope."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class Pagination(CamelModel):
    """Pagination metadata for list endpoints."""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )
