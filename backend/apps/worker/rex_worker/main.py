"""
Worker entry point.

Run with ``arq rex_worker.main.WorkerSettings``.
"""

from typing import Any

from arq.connections import RedisSettings
from arq.worker import func

from rex_core import get_logger, init_logging
from rex_database.session import close_database, init_database

from .config import settings
from .tasks import feed_cache

logger = get_logger(__name__)


async def startup(ctx: dict[str, Any]) -> None:
    """Initialize logging and the database engine."""
    init_logging(settings.log_level)
    init_database(settings.database_url)
    logger.info("Rex worker started")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Dispose the database engine."""
    await close_database()
    logger.info("Rex worker stopped")


class WorkerSettings:
    """arq worker settings."""

    functions = [func(feed_cache.invalidate_follower_feeds, keep_result=0)]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    max_jobs = settings.max_jobs
