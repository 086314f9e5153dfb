"""Storage interface shared by the SQL and document-store adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

UserId = int | str
PostId = int | str


class StoreError(Exception):
    """The underlying database failed or was unreachable."""


class DuplicateEmail(Exception):
    """A user with this email already exists."""


class InvalidIdentifier(ValueError):
    """A raw identifier is not valid for the backend's id type."""


@dataclass(frozen=True)
class UserRecord:
    """A stored user. `password_hash` is only populated for credential checks."""

    id: UserId
    name: str
    email: str
    bio: str | None
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = field(default=None, repr=False)

    def without_secret(self) -> "UserRecord":
        return replace(self, password_hash=None)


@dataclass(frozen=True)
class PostRecord:
    """A stored post joined with its owner's display fields."""

    id: PostId
    user_id: UserId
    content: str
    created_at: datetime
    updated_at: datetime
    user_name: str
    user_avatar: str | None


@dataclass(frozen=True)
class PostFilter:
    """Criteria for listing and counting posts."""

    owner_id: UserId | None = None
    content_contains: str | None = None


class DataStore(ABC):
    """Persistence capabilities the routers rely on.

    Every method either returns its result or raises `StoreError`; adapters
    never leak driver exceptions.
    """

    backend_name: str

    @abstractmethod
    def parse_id(self, raw: str) -> UserId:
        """Convert a path/token identifier to the backend's id type.

        Raises `InvalidIdentifier` when `raw` cannot be an id for this backend.
        """

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the backend answers a trivial request."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create tables/indexes needed by the application if missing."""

    # Users

    @abstractmethod
    def find_user_by_email(self, email: str) -> UserRecord | None:
        """Look up a user by normalized email, including the password hash."""

    @abstractmethod
    def find_user_by_id(self, user_id: UserId) -> UserRecord | None: ...

    @abstractmethod
    def insert_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        bio: str | None = None,
    ) -> UserRecord:
        """Persist a new user. Raises `DuplicateEmail` on a unique violation."""

    @abstractmethod
    def update_user(self, user_id: UserId, fields: dict[str, Any]) -> UserRecord | None:
        """Apply a partial update; returns None when the user is gone."""

    @abstractmethod
    def delete_user_cascade(self, user_id: UserId) -> int:
        """Delete all of the user's posts, then the user. Returns posts removed."""

    @abstractmethod
    def list_users(self, search: str | None, offset: int, limit: int) -> list[UserRecord]:
        """Users ordered by name then id, optionally matching `search` on name or email."""

    @abstractmethod
    def count_users(self, search: str | None) -> int: ...

    # Posts

    @abstractmethod
    def insert_post(self, user_id: UserId, content: str) -> PostRecord | None:
        """Store a post; None when the owner no longer exists."""

    @abstractmethod
    def find_post_by_id(self, post_id: PostId) -> PostRecord | None: ...

    @abstractmethod
    def list_posts(self, post_filter: PostFilter, offset: int, limit: int) -> list[PostRecord]:
        """Posts matching the filter, newest first, ties broken by id descending."""

    @abstractmethod
    def count_posts(self, post_filter: PostFilter) -> int: ...

    @abstractmethod
    def post_counts(self, user_ids: list[UserId]) -> dict[UserId, int]:
        """Number of posts owned by each of `user_ids` (missing ids count as 0)."""

    @abstractmethod
    def update_post(self, post_id: PostId, content: str) -> PostRecord | None:
        """Replace a post's content and refresh its update timestamp."""

    @abstractmethod
    def delete_post(self, post_id: PostId) -> bool: ...

    def close(self) -> None:
        """Release pooled connections."""
