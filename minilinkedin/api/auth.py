"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from minilinkedin.api.dependencies import (
    CurrentUser,
    Store,
    authenticate,
    get_identity_provider,
    get_password_hasher,
    security,
)
from minilinkedin.errors import EmailExists, InvalidCredentials
from minilinkedin.schemas.auth import AuthResponse, UserLogin, UserRegister
from minilinkedin.schemas.common import MessageResponse
from minilinkedin.schemas.user import UserEnvelope
from minilinkedin.services.auth import IdentityProvider, PasswordHasher
from minilinkedin.services.presenters import present_user
from minilinkedin.store.base import DuplicateEmail, PostFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

Identity = Annotated[IdentityProvider, Depends(get_identity_provider)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, store: Store, identity: Identity, hasher: Hasher):
    """Register a new user."""
    if store.find_user_by_email(user_data.email):
        raise EmailExists()

    try:
        user = store.insert_user(
            name=user_data.name,
            email=user_data.email,
            password_hash=hasher.hash(user_data.password),
            bio=user_data.bio or None,
        )
    except DuplicateEmail:
        raise EmailExists() from None

    logger.info(f"Registered user {user.id}")
    return AuthResponse(
        message="User registered successfully",
        user=present_user(user, post_count=0),
        token=identity.issue(user.id),
    )


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, store: Store, identity: Identity, hasher: Hasher):
    """Login with email and password."""
    user = store.find_user_by_email(credentials.email)

    # Same response for unknown email and wrong password
    if user is None:
        hasher.dummy_verify()
        raise InvalidCredentials()
    if not hasher.verify(credentials.password, user.password_hash):
        raise InvalidCredentials()

    post_count = store.count_posts(PostFilter(owner_id=user.id))
    return AuthResponse(
        message="Login successful",
        user=present_user(user.without_secret(), post_count),
        token=identity.issue(user.id),
    )


@router.post("/verify", response_model=UserEnvelope)
async def verify(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Store,
    identity: Identity,
):
    """Verify a bearer token and return its user."""
    user = authenticate(credentials, store, identity, rejection_status=status.HTTP_403_FORBIDDEN)
    post_count = store.count_posts(PostFilter(owner_id=user.id))
    return UserEnvelope(message="Token is valid", user=present_user(user, post_count))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: CurrentUser):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")
