"""
Feed router.

``GET /api/feed`` returns the server-aggregated feed, cached per viewer.
``GET /api/feed/source`` returns the raw inputs so clients can aggregate
with their own pending local changes applied.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends

from rex_core import get_logger
from rex_core.schemas import FeedResponse, FeedSource, UserProfile
from rex_core.services import FeedService

from ..config import settings
from ..dependencies import get_current_user, get_feed_service, get_redis_pool
from ..feed_cache import get_cached_feed, store_feed

logger = get_logger(__name__)

router = APIRouter()


@router.get("")
async def get_feed(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    feed_service: Annotated[FeedService, Depends(get_feed_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> FeedResponse:
    """
    Get the caller's aggregated feed.

    Returns:
        Things with visible activity, most recently active first.
    """
    cached = await get_cached_feed(redis, current_user.id)
    if cached is not None:
        logger.debug("Feed cache hit", extra={"user_id": current_user.id})
        return cached

    feed = await feed_service.build_feed(current_user.id)
    await store_feed(redis, current_user.id, feed, settings.feed_cache_ttl_seconds)
    return feed


@router.get("/source")
async def get_feed_source(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    feed_service: Annotated[FeedService, Depends(get_feed_service)],
) -> FeedSource:
    """Get the caller's visible feed interactions and the things they reference."""
    return await feed_service.load_feed_source(current_user.id)
