"""Post API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from minilinkedin.api.dependencies import CurrentUser, PageParams, Store, post_page_params
from minilinkedin.errors import (
    InvalidPostId,
    PostNotFound,
    SearchQueryRequired,
    UnauthorizedAccess,
    UnknownSubject,
)
from minilinkedin.schemas.common import MessageResponse
from minilinkedin.schemas.post import (
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostSearchResponse,
)
from minilinkedin.services.presenters import post_pagination, present_post
from minilinkedin.store.base import DataStore, InvalidIdentifier, PostFilter, PostRecord

router = APIRouter(prefix="/api/posts", tags=["posts"])

Pagination = Annotated[PageParams, Depends(post_page_params)]


def get_post_or_404(store: DataStore, raw_id: str) -> PostRecord:
    try:
        post_id = store.parse_id(raw_id)
    except InvalidIdentifier:
        raise InvalidPostId() from None
    post = store.find_post_by_id(post_id)
    if post is None:
        raise PostNotFound()
    return post


def get_owned_post(
    store: DataStore, raw_id: str, user_id: Any, code: str, action: str
) -> PostRecord:
    """Fetch a post and check the caller owns it, before any mutation."""
    post = get_post_or_404(store, raw_id)
    if post.user_id != user_id:
        raise UnauthorizedAccess(f"You can only {action} your own posts", code=code)
    return post


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(post_data: PostCreate, current_user: CurrentUser, store: Store):
    """Create a post owned by the caller."""
    post = store.insert_post(current_user.id, post_data.content)
    if post is None:
        raise UnknownSubject()
    return PostEnvelope(message="Post created successfully", post=present_post(post))


@router.get("", response_model=PostListResponse)
async def get_feed(current_user: CurrentUser, store: Store, paging: Pagination):
    """Get all posts, newest first."""
    everything = PostFilter()
    total = store.count_posts(everything)
    posts = []
    if not paging.is_past_end(total):
        posts = store.list_posts(everything, paging.offset, paging.limit)
    return PostListResponse(
        message="Posts retrieved successfully",
        posts=[present_post(post) for post in posts],
        pagination=post_pagination(paging.page, paging.limit, total),
    )


@router.get("/search", response_model=PostSearchResponse)
async def search_posts(
    current_user: CurrentUser,
    store: Store,
    paging: Pagination,
    q: Annotated[str | None, Query(max_length=200)] = None,
):
    """Case-insensitive substring search over post content."""
    query = (q or "").strip()
    if not query:
        raise SearchQueryRequired()

    matching = PostFilter(content_contains=query)
    total = store.count_posts(matching)
    posts = []
    if not paging.is_past_end(total):
        posts = store.list_posts(matching, paging.offset, paging.limit)
    return PostSearchResponse(
        message="Posts search completed",
        posts=[present_post(post) for post in posts],
        query=query,
        pagination=post_pagination(paging.page, paging.limit, total),
    )


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(post_id: str, current_user: CurrentUser, store: Store):
    """Get a specific post."""
    post = get_post_or_404(store, post_id)
    return PostEnvelope(message="Post retrieved successfully", post=present_post(post))


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: str,
    current_user: CurrentUser,
    store: Store,
    payload: Annotated[Any, Body()] = None,
):
    """Replace a post's content (owner only)."""
    post = get_owned_post(store, post_id, current_user.id, "UNAUTHORIZED_EDIT", "edit")

    # Validated only after the ownership check so non-owners always get 403
    try:
        post_data = PostCreate.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in e.errors()]
        ) from e

    updated = store.update_post(post.id, post_data.content)
    if updated is None:
        raise PostNotFound()
    return PostEnvelope(message="Post updated successfully", post=present_post(updated))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: str, current_user: CurrentUser, store: Store):
    """Permanently delete a post (owner only)."""
    post = get_owned_post(store, post_id, current_user.id, "UNAUTHORIZED_ACCESS", "delete")
    if not store.delete_post(post.id):
        raise PostNotFound()
    return MessageResponse(message="Post deleted successfully")
