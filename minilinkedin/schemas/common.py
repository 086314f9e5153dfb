"""Shared response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class PaginationSummary(BaseModel):
    """Pagination metadata accompanying every list response."""

    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_count: int = Field(..., alias="totalCount")
    has_next: bool = Field(..., alias="hasNext")
    has_previous: bool = Field(..., alias="hasPrevious")


class PostPagination(PaginationSummary):
    total_posts: int = Field(..., alias="totalPosts")


class UserPagination(PaginationSummary):
    total_users: int = Field(..., alias="totalUsers")
