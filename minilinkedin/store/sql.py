"""SQLAlchemy-backed data store."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, func, or_, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from minilinkedin.config import Settings
from minilinkedin.database import build_engine, build_session_factory, init_db
from minilinkedin.models.post import Post
from minilinkedin.models.user import User
from minilinkedin.store.base import (
    DataStore,
    DuplicateEmail,
    InvalidIdentifier,
    PostFilter,
    PostRecord,
    StoreError,
    UserRecord,
)

logger = logging.getLogger(__name__)

UPDATABLE_USER_FIELDS = ("name", "bio", "avatar_url")


def _like_pattern(term: str) -> str:
    """Build a LIKE pattern matching `term` as a literal substring."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _user_record(user: User, with_secret: bool = False) -> UserRecord:
    return UserRecord(
        id=user.id,
        name=user.name,
        email=user.email,
        bio=user.bio,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
        password_hash=user.password_hash if with_secret else None,
    )


def _post_record(post: Post, user_name: str, user_avatar: str | None) -> PostRecord:
    return PostRecord(
        id=post.id,
        user_id=post.user_id,
        content=post.content,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user_name=user_name,
        user_avatar=user_avatar,
    )


class SqlDataStore(DataStore):
    """Data store over the relational schema in `minilinkedin.models`.

    Each call runs in its own short-lived session taken from the engine's pool.
    """

    backend_name = "sql"

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None):
        self.engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlDataStore":
        return cls(build_engine(settings.database_url))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error: {e}")
            raise StoreError(str(e)) from e
        finally:
            db.close()

    def _posts_query(self, db: Session, post_filter: PostFilter):
        query = db.query(Post, User.name, User.avatar_url).join(User, Post.user_id == User.id)
        if post_filter.owner_id is not None:
            query = query.filter(Post.user_id == post_filter.owner_id)
        if post_filter.content_contains:
            query = query.filter(
                Post.content.ilike(_like_pattern(post_filter.content_contains), escape="\\")
            )
        return query

    def _users_query(self, db: Session, search: str | None):
        query = db.query(User)
        if search:
            pattern = _like_pattern(search)
            query = query.filter(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )
        return query

    def parse_id(self, raw: str) -> int:
        raw = str(raw)
        if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
            raise InvalidIdentifier(raw)
        return int(raw)

    def ping(self) -> bool:
        try:
            with self._session() as db:
                db.execute(text("SELECT 1"))
            return True
        except StoreError:
            return False

    def ensure_schema(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    # Users

    def find_user_by_email(self, email: str) -> UserRecord | None:
        with self._session() as db:
            user = db.query(User).filter(User.email == email).first()
            return _user_record(user, with_secret=True) if user else None

    def find_user_by_id(self, user_id: int) -> UserRecord | None:
        with self._session() as db:
            user = db.get(User, user_id)
            return _user_record(user) if user else None

    def insert_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        bio: str | None = None,
    ) -> UserRecord:
        with self._session() as db:
            user = User(name=name, email=email, password_hash=password_hash, bio=bio)
            db.add(user)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateEmail(email) from e
            db.refresh(user)
            return _user_record(user)

    def update_user(self, user_id: int, fields: dict[str, Any]) -> UserRecord | None:
        with self._session() as db:
            user = db.get(User, user_id)
            if user is None:
                return None
            for name in UPDATABLE_USER_FIELDS:
                if name in fields:
                    setattr(user, name, fields[name])
            user.touch()
            db.commit()
            db.refresh(user)
            return _user_record(user)

    def delete_user_cascade(self, user_id: int) -> int:
        with self._session() as db:
            removed = (
                db.query(Post)
                .filter(Post.user_id == user_id)
                .delete(synchronize_session=False)
            )
            db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
            db.commit()
            return removed

    def list_users(self, search: str | None, offset: int, limit: int) -> list[UserRecord]:
        with self._session() as db:
            users = (
                self._users_query(db, search)
                .order_by(User.name.asc(), User.id.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_user_record(user) for user in users]

    def count_users(self, search: str | None) -> int:
        with self._session() as db:
            return self._users_query(db, search).count()

    # Posts

    def insert_post(self, user_id: int, content: str) -> PostRecord | None:
        with self._session() as db:
            owner = db.get(User, user_id)
            if owner is None:
                return None
            post = Post(user_id=user_id, content=content)
            db.add(post)
            db.commit()
            db.refresh(post)
            return _post_record(post, owner.name, owner.avatar_url)

    def find_post_by_id(self, post_id: int) -> PostRecord | None:
        with self._session() as db:
            row = self._posts_query(db, PostFilter()).filter(Post.id == post_id).first()
            return _post_record(*row) if row else None

    def list_posts(self, post_filter: PostFilter, offset: int, limit: int) -> list[PostRecord]:
        with self._session() as db:
            rows = (
                self._posts_query(db, post_filter)
                .order_by(Post.created_at.desc(), Post.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [_post_record(*row) for row in rows]

    def count_posts(self, post_filter: PostFilter) -> int:
        with self._session() as db:
            return self._posts_query(db, post_filter).count()

    def post_counts(self, user_ids: list[int]) -> dict[int, int]:
        if not user_ids:
            return {}
        with self._session() as db:
            counts = (
                db.query(Post.user_id, func.count(Post.id))
                .filter(Post.user_id.in_(user_ids))
                .group_by(Post.user_id)
                .all()
            )
            result = dict.fromkeys(user_ids, 0)
            result.update(dict(counts))
            return result

    def update_post(self, post_id: int, content: str) -> PostRecord | None:
        with self._session() as db:
            post = db.get(Post, post_id)
            if post is None:
                return None
            post.content = content
            post.touch()
            db.commit()
            db.refresh(post)
            row = self._posts_query(db, PostFilter()).filter(Post.id == post_id).first()
            return _post_record(*row) if row else None

    def delete_post(self, post_id: int) -> bool:
        with self._session() as db:
            removed = db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
            db.commit()
            return removed > 0

    def close(self) -> None:
        self.engine.dispose()
