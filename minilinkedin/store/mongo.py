"""MongoDB-backed data store."""

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from minilinkedin.config import Settings
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


def _contains(term: str) -> dict[str, str]:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(term), "$options": "i"}


def _user_record(doc: dict[str, Any], with_secret: bool = False) -> UserRecord:
    return UserRecord(
        id=str(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        bio=doc.get("bio"),
        avatar_url=doc.get("avatar_url"),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
        password_hash=doc.get("password") if with_secret else None,
    )


def _post_record(doc: dict[str, Any], owner: dict[str, Any] | None) -> PostRecord:
    return PostRecord(
        id=str(doc["_id"]),
        user_id=str(doc["user_id"]),
        content=doc["content"],
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
        user_name=owner["name"] if owner else "",
        user_avatar=owner.get("avatar_url") if owner else None,
    )


class MongoDataStore(DataStore):
    """Data store over `users` and `posts` collections.

    Identifiers are ObjectIds, exposed to callers as 24-character hex strings.
    """

    backend_name = "mongo"

    def __init__(self, database: Database, client: MongoClient | None = None):
        self.db = database
        self.users = database["users"]
        self.posts = database["posts"]
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDataStore":
        client = MongoClient(
            settings.mongo_url,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        return cls(client[settings.mongo_database], client=client)

    @contextmanager
    def _guard(self) -> Iterator[None]:
        try:
            yield
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error(f"MongoDB error: {e}")
            raise StoreError(str(e)) from e

    def _owners(self, user_ids: set[ObjectId]) -> dict[ObjectId, dict[str, Any]]:
        if not user_ids:
            return {}
        cursor = self.users.find({"_id": {"$in": list(user_ids)}}, {"name": 1, "avatar_url": 1})
        return {doc["_id"]: doc for doc in cursor}

    def _with_owners(self, docs: list[dict[str, Any]]) -> list[PostRecord]:
        owners = self._owners({doc["user_id"] for doc in docs})
        return [_post_record(doc, owners.get(doc["user_id"])) for doc in docs]

    @staticmethod
    def _post_query(post_filter: PostFilter) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if post_filter.owner_id is not None:
            query["user_id"] = ObjectId(post_filter.owner_id)
        if post_filter.content_contains:
            query["content"] = _contains(post_filter.content_contains)
        return query

    @staticmethod
    def _user_query(search: str | None) -> dict[str, Any]:
        if not search:
            return {}
        return {"$or": [{"name": _contains(search)}, {"email": _contains(search)}]}

    def parse_id(self, raw: str) -> str:
        raw = str(raw)
        if not ObjectId.is_valid(raw):
            raise InvalidIdentifier(raw)
        return str(ObjectId(raw))

    def ping(self) -> bool:
        try:
            self.db.command("ping")
            return True
        except PyMongoError:
            return False

    def ensure_schema(self) -> None:
        with self._guard():
            self.users.create_index([("email", ASCENDING)], unique=True)
            self.users.create_index([("name", ASCENDING), ("_id", ASCENDING)])
            self.posts.create_index([("user_id", ASCENDING)])
            self.posts.create_index([("created_at", DESCENDING), ("_id", DESCENDING)])

    # Users

    def find_user_by_email(self, email: str) -> UserRecord | None:
        with self._guard():
            doc = self.users.find_one({"email": email})
        return _user_record(doc, with_secret=True) if doc else None

    def find_user_by_id(self, user_id: str) -> UserRecord | None:
        with self._guard():
            doc = self.users.find_one({"_id": ObjectId(user_id)})
        return _user_record(doc) if doc else None

    def insert_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        bio: str | None = None,
    ) -> UserRecord:
        now = datetime.now(UTC)
        doc = {
            "name": name,
            "email": email,
            "password": password_hash,
            "bio": bio,
            "avatar_url": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with self._guard():
                result = self.users.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateEmail(email) from e
        doc["_id"] = result.inserted_id
        return _user_record(doc)

    def update_user(self, user_id: str, fields: dict[str, Any]) -> UserRecord | None:
        changes = {name: fields[name] for name in UPDATABLE_USER_FIELDS if name in fields}
        changes["updated_at"] = datetime.now(UTC)
        with self._guard():
            result = self.users.update_one({"_id": ObjectId(user_id)}, {"$set": changes})
        if result.matched_count == 0:
            return None
        return self.find_user_by_id(user_id)

    def delete_user_cascade(self, user_id: str) -> int:
        oid = ObjectId(user_id)
        with self._guard():
            removed = self.posts.delete_many({"user_id": oid}).deleted_count
            self.users.delete_one({"_id": oid})
        return removed

    def list_users(self, search: str | None, offset: int, limit: int) -> list[UserRecord]:
        with self._guard():
            cursor = (
                self.users.find(self._user_query(search))
                .sort([("name", ASCENDING), ("_id", ASCENDING)])
                .skip(offset)
                .limit(limit)
            )
            return [_user_record(doc) for doc in cursor]

    def count_users(self, search: str | None) -> int:
        with self._guard():
            return self.users.count_documents(self._user_query(search))

    # Posts

    def insert_post(self, user_id: str, content: str) -> PostRecord | None:
        owner_id = ObjectId(user_id)
        with self._guard():
            if self.users.count_documents({"_id": owner_id}, limit=1) == 0:
                return None
        now = datetime.now(UTC)
        doc = {
            "user_id": owner_id,
            "content": content,
            "created_at": now,
            "updated_at": now,
        }
        with self._guard():
            result = self.posts.insert_one(doc)
            doc["_id"] = result.inserted_id
            return self._with_owners([doc])[0]

    def find_post_by_id(self, post_id: str) -> PostRecord | None:
        with self._guard():
            doc = self.posts.find_one({"_id": ObjectId(post_id)})
            return self._with_owners([doc])[0] if doc else None

    def list_posts(self, post_filter: PostFilter, offset: int, limit: int) -> list[PostRecord]:
        with self._guard():
            cursor = (
                self.posts.find(self._post_query(post_filter))
                .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
                .skip(offset)
                .limit(limit)
            )
            return self._with_owners(list(cursor))

    def count_posts(self, post_filter: PostFilter) -> int:
        with self._guard():
            return self.posts.count_documents(self._post_query(post_filter))

    def post_counts(self, user_ids: list[str]) -> dict[str, int]:
        if not user_ids:
            return {}
        pipeline = [
            {"$match": {"user_id": {"$in": [ObjectId(uid) for uid in user_ids]}}},
            {"$group": {"_id": "$user_id", "count": {"$sum": 1}}},
        ]
        result = dict.fromkeys(user_ids, 0)
        with self._guard():
            for row in self.posts.aggregate(pipeline):
                result[str(row["_id"])] = row["count"]
        return result

    def update_post(self, post_id: str, content: str) -> PostRecord | None:
        with self._guard():
            result = self.posts.update_one(
                {"_id": ObjectId(post_id)},
                {"$set": {"content": content, "updated_at": datetime.now(UTC)}},
            )
        if result.matched_count == 0:
            return None
        return self.find_post_by_id(post_id)

    def delete_post(self, post_id: str) -> bool:
        with self._guard():
            return self.posts.delete_one({"_id": ObjectId(post_id)}).deleted_count > 0

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
