"""FastAPI dependencies for authentication, storage and pagination."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from minilinkedin.errors import (
    AuthInfrastructureError,
    ExpiredCredential,
    InvalidCredential,
    MissingCredential,
    UnknownSubject,
)
from minilinkedin.services.auth import (
    CredentialExpired,
    CredentialMalformed,
    IdentityProvider,
    PasswordHasher,
)
from minilinkedin.store.base import DataStore, InvalidIdentifier, StoreError, UserRecord

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

MAX_PAGE_SIZE = 100


def get_store(request: Request) -> DataStore:
    """Data store constructed at startup."""
    return request.app.state.store


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def authenticate(
    credentials: HTTPAuthorizationCredentials | None,
    store: DataStore,
    identity: IdentityProvider,
    rejection_status: int = status.HTTP_401_UNAUTHORIZED,
) -> UserRecord:
    """Resolve a bearer credential to its user or raise the matching ApiError.

    `rejection_status` applies to invalid and expired tokens; missing tokens and
    deleted users are always 401.
    """
    if credentials is None or not credentials.credentials:
        raise MissingCredential()

    try:
        claims = identity.verify(credentials.credentials)
    except CredentialExpired:
        raise ExpiredCredential(status_code=rejection_status) from None
    except CredentialMalformed:
        raise InvalidCredential(status_code=rejection_status) from None

    try:
        user_id = store.parse_id(claims.subject)
    except InvalidIdentifier:
        raise InvalidCredential(status_code=rejection_status) from None

    try:
        user = store.find_user_by_id(user_id)
    except StoreError as e:
        logger.error(f"Authentication lookup failed for user {user_id}: {e}")
        raise AuthInfrastructureError() from e

    if user is None:
        raise UnknownSubject()

    return user.without_secret()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[DataStore, Depends(get_store)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> UserRecord:
    """Get the current authenticated user from the bearer token."""
    return authenticate(credentials, store, identity)


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def is_past_end(self, total: int) -> bool:
        """True when the page starts after the last of `total` items."""
        return self.offset >= total


def _page_params(page: int, limit: int) -> PageParams:
    return PageParams(page=max(1, page), limit=max(1, min(MAX_PAGE_SIZE, limit)))


def post_page_params(
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = 10,
) -> PageParams:
    """Feed pagination: page >= 1, limit clamped to 1..100, default 10."""
    return _page_params(page, limit)


def user_page_params(
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = 20,
) -> PageParams:
    """User discovery pagination: same rules, default limit 20."""
    return _page_params(page, limit)


CurrentUser = Annotated[UserRecord, Depends(get_current_user)]
Store = Annotated[DataStore, Depends(get_store)]
