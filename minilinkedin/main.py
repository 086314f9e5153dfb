"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from minilinkedin import __version__
from minilinkedin.api import auth, posts, users
from minilinkedin.config import Settings, get_settings
from minilinkedin.errors import register_exception_handlers
from minilinkedin.services.auth import IdentityProvider, PasswordHasher
from minilinkedin.store import DataStore, build_store

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: DataStore | None = None) -> FastAPI:
    """Build the application from an explicit configuration.

    The store, identity provider and password hasher are constructed here and
    handed to request handlers through `app.state`.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        if settings.auto_create_schema:
            app.state.store.ensure_schema()
        logger.info(
            f"Mini LinkedIn API started (environment={settings.environment}, "
            f"store={app.state.store.backend_name})"
        )
        yield
        app.state.store.close()

    app = FastAPI(
        title="Mini LinkedIn API",
        description="Small social feed: profiles, posts and search",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.identity = IdentityProvider.from_settings(settings)
    app.state.hasher = PasswordHasher.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(posts.router)

    @app.get("/api/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        store: DataStore = request.app.state.store
        return {
            "status": "OK",
            "message": "Mini LinkedIn API is running",
            "environment": settings.environment,
            "database": {
                "backend": store.backend_name,
                "connected": store.ping(),
            },
        }

    return app


app = create_app()
