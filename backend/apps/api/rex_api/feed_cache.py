"""Per-viewer feed cache helpers.

The aggregated feed is cached in Redis for a short TTL. Writes invalidate
the actor's cache directly and enqueue a worker job that clears the caches
of the actor's followers. Redis failures degrade to cache misses.
"""

from arq.connections import ArqRedis
from pydantic import ValidationError
from redis.exceptions import RedisError

from rex_core import get_logger
from rex_core.redis_keys import RedisKeys
from rex_core.schemas import FeedResponse

logger = get_logger(__name__)


async def get_cached_feed(redis: ArqRedis, user_id: str) -> FeedResponse | None:
    """Return the cached feed for a viewer, or None on miss or error."""
    try:
        raw = await redis.get(RedisKeys.feed_payload(user_id))
    except RedisError as e:
        logger.warning("Feed cache read failed", extra={"user_id": user_id, "error": str(e)})
        return None
    if raw is None:
        return None
    try:
        return FeedResponse.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding malformed cached feed", extra={"user_id": user_id})
        return None


async def store_feed(redis: ArqRedis, user_id: str, feed: FeedResponse, ttl_seconds: int) -> None:
    """Cache a viewer's feed."""
    try:
        await redis.setex(RedisKeys.feed_payload(user_id), ttl_seconds, feed.model_dump_json())
    except RedisError as e:
        logger.warning("Feed cache write failed", extra={"user_id": user_id, "error": str(e)})


async def invalidate_feed(redis: ArqRedis, *user_ids: str) -> None:
    """Drop the cached feeds of the given viewers."""
    if not user_ids:
        return
    try:
        await redis.delete(*(RedisKeys.feed_payload(user_id) for user_id in user_ids))
    except RedisError as e:
        logger.warning("Feed cache invalidation failed", extra={"error": str(e)})


async def enqueue_follower_invalidation(redis: ArqRedis, user_id: str) -> None:
    """
    Enqueue the job that clears the feed caches of ``user_id``'s followers.

    Jobs carry no fixed id, so every write queues its own fan-out.
    """
    try:
        await redis.enqueue_job("invalidate_follower_feeds", user_id)
    except RedisError as e:
        logger.warning(
            "Failed to enqueue follower feed invalidation",
            extra={"user_id": user_id, "error": str(e)},
        )


async def refresh_after_write(redis: ArqRedis, actor_id: str, *owner_ids: str) -> None:
    """
    Invalidate caches affected by a write.

    Args:
        redis: Redis pool.
        actor_id: User who performed the write.
        owner_ids: Owners of the records touched, if not the actor.
    """
    affected = list(dict.fromkeys((actor_id, *owner_ids)))
    await invalidate_feed(redis, *affected)
    for user_id in affected:
        await enqueue_follower_invalidation(redis, user_id)
