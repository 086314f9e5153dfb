"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from minilinkedin.schemas.common import UserPagination


class UserResponse(BaseModel):
    """Public user profile. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    name: str
    email: str
    bio: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime
    post_count: int = Field(0, alias="postCount")


class UserUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500)

    @field_validator("name", "bio", "avatar_url", mode="before")
    @classmethod
    def strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class UserListResponse(BaseModel):
    message: str
    users: list[UserResponse]
    pagination: UserPagination
