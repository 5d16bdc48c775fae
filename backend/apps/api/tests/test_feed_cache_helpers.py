"""Tests for feed cache helpers."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from rex_api.feed_cache import enqueue_follower_invalidation, get_cached_feed, refresh_after_write


@pytest.mark.asyncio
async def test_each_write_enqueues_its_own_fan_out() -> None:
    """Repeated writes by one user are never collapsed into one job."""
    redis = AsyncMock()

    await enqueue_follower_invalidation(redis, "alice")
    await enqueue_follower_invalidation(redis, "alice")

    assert redis.enqueue_job.await_count == 2
    for call in redis.enqueue_job.await_args_list:
        assert call.args == ("invalidate_follower_feeds", "alice")
        assert "_job_id" not in call.kwargs


@pytest.mark.asyncio
async def test_refresh_after_write_covers_actor_and_owner() -> None:
    """Both caches are dropped and each user gets a fan-out job."""
    redis = AsyncMock()

    await refresh_after_write(redis, "alice", "bob", "alice")

    redis.delete.assert_awaited_once_with("feed_payload:alice", "feed_payload:bob")
    assert [c.args[1] for c in redis.enqueue_job.await_args_list] == ["alice", "bob"]


@pytest.mark.asyncio
async def test_redis_errors_are_cache_misses() -> None:
    """A Redis failure on read behaves like an empty cache."""
    redis = AsyncMock()
    redis.get.side_effect = RedisConnectionError("down")

    assert await get_cached_feed(redis, "alice") is None
