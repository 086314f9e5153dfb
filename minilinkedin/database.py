"""Database engine and session factory construction."""

from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base: Any = declarative_base()


def build_engine(database_url: str) -> Engine:
    """Create a pooled engine for the given database URL."""
    if database_url.startswith("sqlite"):
        # SQLite connections are shared with the test client's worker thread
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Initialize the database by creating all tables."""
    # Import all models here so they are registered with Base.metadata
    from minilinkedin import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
