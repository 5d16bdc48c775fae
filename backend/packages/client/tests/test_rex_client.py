"""Tests for the Rex API client against the in-process app."""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from rex_api.main import app
from rex_client import FeedSession, RexClient
from rex_core.feed import InteractionStore, MutationStatus
from rex_core.schemas import CommentCreate, InteractionCreate, InteractionState, InteractionUpdate


@pytest_asyncio.fixture
async def rex(client, test_user, token_for):
    """RexClient for the test user, sharing the overridden app with ``client``."""
    async with RexClient(
        "http://test", token_for(test_user.id), transport=ASGITransport(app=app)
    ) as rex_client:
        yield rex_client


@pytest_asyncio.fixture
async def dune_id(client, auth_headers) -> str:
    response = await client.post(
        "/api/things", json={"title": "Dune", "category": "books"}, headers=auth_headers
    )
    return response.json()["id"]


class TestRexClient:
    """Test client calls map onto the API."""

    @pytest.mark.asyncio
    async def test_get_me(self, rex, test_user):
        """Test fetching the signed-in profile."""
        me = await rex.get_me()

        assert me.id == test_user.id

    @pytest.mark.asyncio
    async def test_interaction_round_trip(self, rex, dune_id):
        """Test create, update, like and delete through the client."""
        created = await rex.create_interaction(InteractionCreate(thing_id=dune_id))
        assert created.state == InteractionState.BUCKET_LIST

        updated = await rex.update_interaction(
            created.id, InteractionUpdate(state=InteractionState.COMPLETED, rating=5)
        )
        assert updated.rating == 5

        liked = await rex.like_interaction(created.id)
        assert liked.liked_by == [created.user_id]

        await rex.delete_interaction(created.id)
        source = await rex.get_feed_source()
        assert source.interactions == []

    @pytest.mark.asyncio
    async def test_comments_and_share_link(self, rex, dune_id):
        """Test comment creation and listing, and share link building."""
        comment = await rex.create_comment(dune_id, CommentCreate(content="Must read"))
        assert [c.id for c in await rex.list_comments(dune_id)] == [comment.id]

        link = await rex.share_link(dune_id, to_name="Sam")
        assert link.sms_body.startswith("Hey Sam!")

    @pytest.mark.asyncio
    async def test_errors_raise(self, rex):
        """Test that API errors surface as HTTP status errors."""
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await rex.create_interaction(InteractionCreate(thing_id="missing"))

        assert exc_info.value.response.status_code == 404


class TestFeedSessionEndToEnd:
    """Test a feed session against the real API."""

    @pytest.mark.asyncio
    async def test_save_complete_remove(self, rex, dune_id, test_user):
        """Test the optimistic flow with the server confirming each step."""
        session = FeedSession(rex, InteractionStore(test_user.id))
        assert await session.load() == []

        saved = await session.save(dune_id)
        assert saved.status is MutationStatus.COMMITTED
        assert not saved.value.id.startswith("local-")
        # Not refetched yet; the store carries the save
        (item,) = session.feed
        assert item.my_interaction.state == InteractionState.BUCKET_LIST

        completed = await session.complete(dune_id, rating=4)
        assert completed.status is MutationStatus.COMMITTED
        assert session.feed[0].avg_rating == 4

        # Refetch: the server agrees, so the override is retired
        await session.load()
        assert session.store.get_by_thing_id(dune_id) is None
        assert session.feed[0].my_interaction.rating == 4

        removed = await session.remove(dune_id)
        assert removed.status is MutationStatus.COMMITTED
        assert session.feed == []
        assert await session.load() == []
