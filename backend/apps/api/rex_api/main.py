"""
Rex API - FastAPI application entry point.

This module builds the FastAPI application and configures
middleware, routers, and lifecycle events.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from arq import create_pool
from arq.connections import RedisSettings
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rex_core import get_logger, init_logging
from rex_database.session import close_database, init_database

from .config import settings
from .dependencies import get_redis_pool, set_redis_pool
from .routers import comments, feed, interactions, recommendations, share, tags, things, users

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifecycle manager.

    Handles startup and shutdown events for the application.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    # Startup: Initialize resources
    init_logging(settings.log_level)
    logger.info("Starting Rex API", extra={"version": settings.version})
    init_database(settings.database_url, echo=settings.database_echo)

    # Redis pool for the task queue and feed cache
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    set_redis_pool(await create_pool(redis_settings))
    logger.info("Redis pool initialized")

    yield

    # Shutdown: Cleanup resources
    redis_pool = await get_redis_pool()
    await redis_pool.close()
    set_redis_pool(None)
    await close_database()
    logger.info("Shutting down Rex API")


def create_app() -> FastAPI:
    """
    Build a new FastAPI application instance.

    Returns:
        Configured application.
    """
    app = FastAPI(
        title="Rex API",
        description="Rex - share and track recommendations from friends",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routers
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(things.router, prefix="/api/things", tags=["Things"])
    app.include_router(interactions.router, prefix="/api/interactions", tags=["Interactions"])
    app.include_router(comments.router, prefix="/api/comments", tags=["Comments"])
    app.include_router(tags.router, prefix="/api/tags", tags=["Tags"])
    app.include_router(
        recommendations.router, prefix="/api/recommendations", tags=["Recommendations"]
    )
    app.include_router(feed.router, prefix="/api/feed", tags=["Feed"])
    app.include_router(share.router, prefix="/api/share", tags=["Share"])

    @app.get("/api/health")
    async def health_check() -> dict[str, str]:
        """
        Health check endpoint.

        Returns:
            Dictionary containing service status and version.
        """
        return {"status": "healthy", "version": settings.version}

    return app


app = create_app()
