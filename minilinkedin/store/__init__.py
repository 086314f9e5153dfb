"""Data store interface and backend adapters."""

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


def build_store(settings: Settings) -> DataStore:
    """Construct the adapter selected by `settings.store_backend`."""
    if settings.store_backend == "mongo":
        from minilinkedin.store.mongo import MongoDataStore

        return MongoDataStore.from_settings(settings)

    from minilinkedin.store.sql import SqlDataStore

    return SqlDataStore.from_settings(settings)


__all__ = [
    "DataStore",
    "DuplicateEmail",
    "InvalidIdentifier",
    "PostFilter",
    "PostRecord",
    "StoreError",
    "UserRecord",
    "build_store",
]
