"""Response shaping for users and posts.

Every router goes through these functions, so the password hash is never
serialized, profiles always carry a post count and posts always carry their
owner's display fields.
"""

import math

from minilinkedin.schemas.common import PostPagination, UserPagination
from minilinkedin.schemas.post import PostResponse
from minilinkedin.schemas.user import UserResponse
from minilinkedin.store.base import PostRecord, UserRecord


def present_user(user: UserRecord, post_count: int) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        bio=user.bio,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
        post_count=post_count,
    )


def present_post(post: PostRecord) -> PostResponse:
    return PostResponse(
        id=post.id,
        content=post.content,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user_id=post.user_id,
        user_name=post.user_name,
        user_avatar=post.user_avatar,
    )


def _summary(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit)
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_count": total,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }


def post_pagination(page: int, limit: int, total: int) -> PostPagination:
    return PostPagination(**_summary(page, limit, total), total_posts=total)


def user_pagination(page: int, limit: int, total: int) -> UserPagination:
    return UserPagination(**_summary(page, limit, total), total_users=total)
