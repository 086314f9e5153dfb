"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from minilinkedin.schemas.common import PostPagination

POST_MAX_LENGTH = 2000


class PostCreate(BaseModel):
    """Create or replace a post's content."""

    content: str = Field(..., min_length=1, max_length=POST_MAX_LENGTH)

    @field_validator("content", mode="before")
    @classmethod
    def strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class PostResponse(BaseModel):
    """Post joined with its owner's display fields."""

    id: int | str
    content: str
    created_at: datetime
    updated_at: datetime
    user_id: int | str
    user_name: str
    user_avatar: str | None


class PostEnvelope(BaseModel):
    message: str
    post: PostResponse


class PostListResponse(BaseModel):
    message: str
    posts: list[PostResponse]
    pagination: PostPagination


class PostSearchResponse(PostListResponse):
    query: str
