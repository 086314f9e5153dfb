"""User profile API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from minilinkedin.api.dependencies import (
    CurrentUser,
    PageParams,
    Store,
    post_page_params,
    user_page_params,
)
from minilinkedin.errors import (
    InvalidUserId,
    NoUpdateFields,
    UnauthorizedUpdate,
    UserNotFound,
)
from minilinkedin.schemas.common import MessageResponse
from minilinkedin.schemas.post import PostListResponse
from minilinkedin.schemas.user import UserEnvelope, UserListResponse, UserUpdate
from minilinkedin.services.presenters import (
    post_pagination,
    present_post,
    present_user,
    user_pagination,
)
from minilinkedin.store.base import DataStore, InvalidIdentifier, PostFilter, UserRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def parse_user_id(store: DataStore, raw_id: str):
    try:
        return store.parse_id(raw_id)
    except InvalidIdentifier:
        raise InvalidUserId() from None


def get_user_or_404(store: DataStore, raw_id: str) -> UserRecord:
    user = store.find_user_by_id(parse_user_id(store, raw_id))
    if user is None:
        raise UserNotFound()
    return user


def profile(store: DataStore, user: UserRecord, message: str) -> UserEnvelope:
    post_count = store.count_posts(PostFilter(owner_id=user.id))
    return UserEnvelope(message=message, user=present_user(user, post_count))


def apply_profile_update(store: DataStore, user: UserRecord, update: UserUpdate) -> UserEnvelope:
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise NoUpdateFields()

    updated = store.update_user(user.id, fields)
    if updated is None:
        raise UserNotFound()
    return profile(store, updated, "Profile updated successfully")


@router.get("", response_model=UserListResponse)
async def list_users(
    current_user: CurrentUser,
    store: Store,
    paging: Annotated[PageParams, Depends(user_page_params)],
    search: Annotated[str | None, Query(max_length=200)] = None,
):
    """List users, optionally filtered by a name or email substring."""
    term = (search or "").strip() or None
    total = store.count_users(term)
    users = []
    if not paging.is_past_end(total):
        users = store.list_users(term, paging.offset, paging.limit)
    counts = store.post_counts([user.id for user in users])
    return UserListResponse(
        message="Users retrieved successfully",
        users=[present_user(user, counts.get(user.id, 0)) for user in users],
        pagination=user_pagination(paging.page, paging.limit, total),
    )


@router.get("/profile/me", response_model=UserEnvelope)
async def get_my_profile(current_user: CurrentUser, store: Store):
    """Get the caller's own profile."""
    return profile(store, current_user, "User profile retrieved successfully")


@router.put("/profile", response_model=UserEnvelope)
async def update_my_profile(update: UserUpdate, current_user: CurrentUser, store: Store):
    """Update the caller's own profile."""
    return apply_profile_update(store, current_user, update)


@router.delete("/profile", response_model=MessageResponse)
async def delete_my_account(current_user: CurrentUser, store: Store):
    """Delete the caller's account and every post they own."""
    removed = store.delete_user_cascade(current_user.id)
    logger.info(f"Deleted user {current_user.id} and {removed} posts")
    return MessageResponse(message="Account deleted successfully")


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user_profile(user_id: str, current_user: CurrentUser, store: Store):
    """Get a user profile by id."""
    user = get_user_or_404(store, user_id)
    return profile(store, user, "User profile retrieved successfully")


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user_profile(
    user_id: str, update: UserUpdate, current_user: CurrentUser, store: Store
):
    """Update a profile by id; only the caller's own id is accepted."""
    if parse_user_id(store, user_id) != current_user.id:
        raise UnauthorizedUpdate()
    return apply_profile_update(store, current_user, update)


@router.get("/{user_id}/posts", response_model=PostListResponse)
async def get_user_posts(
    user_id: str,
    current_user: CurrentUser,
    store: Store,
    paging: Annotated[PageParams, Depends(post_page_params)],
):
    """Get a user's posts, newest first."""
    user = get_user_or_404(store, user_id)
    authored = PostFilter(owner_id=user.id)
    total = store.count_posts(authored)
    posts = []
    if not paging.is_past_end(total):
        posts = store.list_posts(authored, paging.offset, paging.limit)
    return PostListResponse(
        message="User posts retrieved successfully",
        posts=[present_post(post) for post in posts],
        pagination=post_pagination(paging.page, paging.limit, total),
    )
