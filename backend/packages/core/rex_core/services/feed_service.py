"""
Feed service.

Loads the interactions a viewer's feed is built from: every interaction of
the viewer plus the non-private interactions of the people they follow.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.feed import aggregate_feed, filter_visible
from rex_core.schemas import FeedResponse, FeedSource, InteractionResponse, Visibility
from rex_database.models import UserThingInteraction

from .thing_service import ThingService
from .user_service import load_following_ids

logger = get_logger(__name__)

DEFAULT_INTERACTION_LIMIT = 100


class FeedService:
    """Feed loading and aggregation service."""

    def __init__(self, session: AsyncSession, interaction_limit: int = DEFAULT_INTERACTION_LIMIT):
        """
        Initialize feed service.

        Args:
            session: Database session.
            interaction_limit: Maximum number of followed users' interactions
                loaded per feed, most recent activity first.
        """
        self.session = session
        self.interaction_limit = interaction_limit

    async def load_feed_source(self, viewer_id: str) -> FeedSource:
        """
        Load the raw, visibility-filtered inputs of a viewer's feed.

        Args:
            viewer_id: Requesting user.

        Returns:
            Interactions (most recent activity first) and the things they
            reference.
        """
        following = await load_following_ids(self.session, viewer_id)

        own_stmt = (
            select(UserThingInteraction)
            .where(UserThingInteraction.user_id == viewer_id)
            .order_by(UserThingInteraction.date.desc())
        )
        rows = list((await self.session.execute(own_stmt)).scalars().all())

        if following:
            friends_stmt = (
                select(UserThingInteraction)
                .where(
                    UserThingInteraction.user_id.in_(following),
                    UserThingInteraction.visibility != Visibility.PRIVATE.value,
                )
                .order_by(UserThingInteraction.date.desc())
                .limit(self.interaction_limit)
            )
            rows.extend((await self.session.execute(friends_stmt)).scalars().all())

        interactions = [InteractionResponse.model_validate(r) for r in rows]
        interactions.sort(key=lambda i: i.date, reverse=True)
        interactions = filter_visible(interactions, viewer_id, following)

        things = await ThingService(self.session).get_things(i.thing_id for i in interactions)

        logger.debug(
            "Feed source loaded",
            extra={
                "viewer_id": viewer_id,
                "interactions": len(interactions),
                "things": len(things),
            },
        )
        return FeedSource(
            viewer_id=viewer_id,
            following=sorted(following),
            interactions=interactions,
            things=list(things.values()),
        )

    async def build_feed(self, viewer_id: str) -> FeedResponse:
        """
        Build the aggregated feed for a viewer.

        Args:
            viewer_id: Requesting user.

        Returns:
            Feed entries ordered by most recent activity.
        """
        source = await self.load_feed_source(viewer_id)
        items = aggregate_feed(
            source.interactions,
            {t.id: t for t in source.things},
            viewer_id,
            source.following,
        )
        return FeedResponse(items=items, generated_at=datetime.now(UTC))
