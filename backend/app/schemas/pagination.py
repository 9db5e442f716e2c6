from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Page-based pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number, starting at 1")
    limit: int = Field(default=20, ge=1, le=100, description="Items per page")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list response."""

    items: list[T] = Field(description="Items on the current page")
    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page")
    limit: int = Field(description="Page size")
    total_pages: int = Field(description="Total number of pages")

    @classmethod
    def create(
        cls,
        items: list[T],
        total: int,
        page: int,
        limit: int,
    ) -> PaginatedResponse[T]:
        total_pages = (total + limit - 1) // limit if total > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
        )
