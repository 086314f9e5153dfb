"""Pydantic schemas for API requests and responses."""

from minilinkedin.schemas.auth import AuthResponse, UserLogin, UserRegister
from minilinkedin.schemas.common import MessageResponse, PaginationSummary
from minilinkedin.schemas.post import (
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostSearchResponse,
)
from minilinkedin.schemas.user import UserEnvelope, UserListResponse, UserResponse, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "UserUpdate",
    "UserEnvelope",
    "UserListResponse",
    "PostCreate",
    "PostResponse",
    "PostEnvelope",
    "PostListResponse",
    "PostSearchResponse",
    "MessageResponse",
    "PaginationSummary",
]
