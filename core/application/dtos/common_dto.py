"""Shared DTOs."""

from pydantic import BaseModel, Field


class PaginationDTO(BaseModel):
    """Pagination block returned with every list."""

    page: int = Field(..., ge=1, description="Current page (1-based)")
    limit: int = Field(..., ge=1, description="Page size")
    total_count: int = Field(..., ge=0, description="Total matching rows")
    total_pages: int = Field(..., ge=0, description="Number of pages")
    has_next: bool = Field(..., description="A later page exists")
    has_prev: bool = Field(..., description="An earlier page exists")

    model_config = {"frozen": True}

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "PaginationDTO":
        total_pages = (total_count + limit - 1) // limit
        return cls(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )
