"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/mini_linkedin", "/mini_linkedin_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
    # minilinkedin.main builds a module-level app from the environment on import
    os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL

from minilinkedin.config import Settings  # noqa: E402
from minilinkedin.database import Base, build_engine, init_db  # noqa: E402
from minilinkedin.main import create_app  # noqa: E402
from minilinkedin.store.sql import SqlDataStore  # noqa: E402

TEST_PASSWORD = "Aa1!aaaa"


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id=None, email: str | None = None, token=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


@pytest.fixture(scope="session")
def engine():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    engine = build_engine(SQLALCHEMY_DATABASE_URL)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def store(engine):
    """Data store over the test database; tables are emptied after each test."""
    yield SqlDataStore(engine)

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def settings():
    return Settings(
        database_url=SQLALCHEMY_DATABASE_URL,
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture(scope="function")
def client(app):
    """Create a test client bound to the test store."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client):
    """Return a helper that registers a user and returns their auth headers."""

    def _register(name: str = "Test User", email: str = "test@example.com", **extra):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": TEST_PASSWORD, **extra},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        token = data["token"]
        return AuthHeaders(
            {"Authorization": f"Bearer {token}"},
            user_id=data["user"]["id"],
            email=data["user"]["email"],
            token=token,
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Create a user and return auth headers with user info."""
    return register_user()


@pytest.fixture
def other_headers(register_user):
    """A second, unrelated user."""
    return register_user(name="Other User", email="other@example.com")


@pytest.fixture
def create_post(client):
    """Return a helper that creates a post and returns its JSON."""

    def _create(headers, content: str = "hello"):
        response = client.post("/api/posts", headers=headers, json={"content": content})
        assert response.status_code == 201, response.text
        return response.json()["post"]

    return _create
