"""Feed cache fan-out tasks."""

from typing import Any

from sqlalchemy import select

from rex_core import get_logger
from rex_core.redis_keys import RedisKeys
from rex_database.models import UserFollow
from rex_database.session import get_session_context

logger = get_logger(__name__)


async def invalidate_follower_feeds(ctx: dict[str, Any], user_id: str) -> dict[str, Any]:
    """
    Drop the cached feeds of everyone following ``user_id``.

    Enqueued by the API after a write so followers see it on their next
    feed fetch instead of after the cache TTL.

    Args:
        ctx: arq context (``ctx["redis"]`` is the Redis pool).
        user_id: User whose activity changed.

    Returns:
        Summary with the number of follower caches cleared.
    """
    async with get_session_context() as session:
        result = await session.execute(
            select(UserFollow.follower_id).where(UserFollow.followee_id == user_id)
        )
        follower_ids = list(result.scalars().all())

    deleted = 0
    if follower_ids:
        deleted = await ctx["redis"].delete(*(RedisKeys.feed_payload(f) for f in follower_ids))

    logger.info(
        "Follower feed caches invalidated",
        extra={"user_id": user_id, "followers": len(follower_ids), "deleted": deleted},
    )
    return {"success": True, "user_id": user_id, "followers": len(follower_ids), "deleted": deleted}
