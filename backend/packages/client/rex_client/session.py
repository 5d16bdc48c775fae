"""
Client feed session.

Holds the last fetched feed source and the user's interaction store, and
runs save / complete / edit / remove as optimistic mutations: the store is
patched and the feed re-aggregated before the request is sent, and
reverted if the request fails.
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from rex_core import get_logger
from rex_core.feed import InteractionStore, MutationResult, aggregate_feed, run_optimistic
from rex_core.schemas import (
    FeedSource,
    FeedThing,
    InteractionCreate,
    InteractionResponse,
    InteractionState,
    InteractionUpdate,
    ThingResponse,
    UserProfile,
    Visibility,
)

from .client import RexClient

logger = get_logger(__name__)

LOCAL_ID_PREFIX = "local-"


class MutationInProgressError(RuntimeError):
    """A mutation for the same thing is already awaiting its response."""

    def __init__(self, thing_id: str):
        super().__init__(f"A change to {thing_id} is already in flight")
        self.thing_id = thing_id


class FeedSession:
    """
    One signed-in user's view of the feed.

    The in-flight guard is per thing and per session only; two sessions
    for the same user can still race, and whichever write reaches the
    server last wins.
    """

    def __init__(self, client: RexClient, store: InteractionStore, viewer: UserProfile | None = None):
        """
        Initialize the session.

        Args:
            client: API client authenticated as the store's user.
            store: The user's interaction store, shared by reference.
            viewer: The user's profile; fetched on first load when omitted.
        """
        self.client = client
        self.store = store
        self.viewer = viewer
        self.feed: list[FeedThing] = []
        self.pending: dict[str, MutationResult] = {}
        self._source: FeedSource | None = None
        self._things: dict[str, ThingResponse] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Stop refreshing this session's feed.

        Responses that arrive later still commit to or roll back the shared
        store; only this session's view is left alone.
        """
        self._closed = True

    async def load(self) -> list[FeedThing]:
        """
        Fetch the feed source, reconcile the store and re-aggregate.

        Returns:
            The aggregated feed.
        """
        if self.viewer is None:
            self.viewer = await self.client.get_me()
        source = await self.client.get_feed_source()
        if self._closed:
            return self.feed

        self.store.sync(source.interactions)
        self._source = source
        self._things.update({t.id: t for t in source.things})
        return self.refresh()

    def refresh(self) -> list[FeedThing]:
        """Re-aggregate the last fetched source with the store applied."""
        if self._source is None:
            self.feed = []
            return self.feed
        self.feed = aggregate_feed(
            self._source.interactions,
            self._things,
            self._source.viewer_id,
            self._source.following,
            overrides=self.store,
        )
        return self.feed

    def remember_thing(self, thing: ThingResponse) -> None:
        """Make a thing known locally, e.g. one just picked from search results."""
        self._things[thing.id] = thing

    def my_interaction(self, thing_id: str) -> InteractionResponse | None:
        """The user's current interaction on a thing, local overrides first."""
        override = self.store.get_by_thing_id(thing_id)
        if override is not None:
            return override
        if self._source is None:
            return None
        mine = [
            i
            for i in self._source.interactions
            if i.thing_id == thing_id
            and i.user_id == self.store.user_id
            and not self.store.is_removed(i.id)
        ]
        return max(mine, key=lambda i: i.date) if mine else None

    async def save(
        self,
        thing_id: str,
        visibility: Visibility = Visibility.FRIENDS,
        recommended_by_user_id: str | None = None,
    ) -> MutationResult[InteractionResponse]:
        """
        Add a thing to the bucket list.

        A thing not yet in the feed is fetched first; a failed fetch raises
        ``httpx.HTTPStatusError`` before anything is patched.
        """
        current = self.my_interaction(thing_id)
        if current is not None:
            return await self.edit(thing_id, state=InteractionState.BUCKET_LIST)
        return await self._create(
            InteractionCreate(
                thing_id=thing_id,
                state=InteractionState.BUCKET_LIST,
                visibility=visibility,
                recommended_by_user_id=recommended_by_user_id,
            )
        )

    async def complete(
        self, thing_id: str, rating: int | None = None
    ) -> MutationResult[InteractionResponse]:
        """Mark a thing completed, optionally with a rating."""
        fields: dict[str, Any] = {"state": InteractionState.COMPLETED}
        if rating is not None:
            fields["rating"] = rating

        if self.my_interaction(thing_id) is not None:
            return await self.edit(thing_id, **fields)
        return await self._create(InteractionCreate(thing_id=thing_id, **fields))

    async def edit(self, thing_id: str, **fields: Any) -> MutationResult[InteractionResponse]:
        """
        Patch the user's interaction on a thing.

        Raises:
            ValueError: If the user has no interaction on the thing.
            MutationInProgressError: If a change to the thing is in flight.
        """
        current = self.my_interaction(thing_id)
        if current is None:
            raise ValueError("No interaction for this thing")
        update = InteractionUpdate(**fields)
        patch = update.model_dump(exclude_unset=True)
        if "state" in patch and patch["state"] != current.state:
            patch["date"] = datetime.now(UTC)

        def apply() -> None:
            if current.id in self.store:
                self.store.update(current.id, **patch)
            else:
                self.store.add(
                    InteractionResponse.model_validate({**current.model_dump(), **patch})
                )

        return await self._mutate(
            thing_id,
            apply,
            lambda: self.client.update_interaction(current.id, update),
            self.store.add,
        )

    async def remove(self, thing_id: str) -> MutationResult[None]:
        """
        Delete the user's interaction on a thing.

        The entry stays hidden until the next ``load``.

        Raises:
            ValueError: If the user has no interaction on the thing.
        """
        current = self.my_interaction(thing_id)
        if current is None:
            raise ValueError("No interaction for this thing")

        return await self._mutate(
            thing_id,
            lambda: self.store.remove(current.id, thing_id=thing_id),
            lambda: self.client.delete_interaction(current.id),
        )

    async def unsave(self, thing_id: str) -> MutationResult[None]:
        """
        Take a thing off the bucket list.

        Raises:
            ValueError: If the thing is not on the bucket list.
        """
        current = self.my_interaction(thing_id)
        if current is None or current.state != InteractionState.BUCKET_LIST:
            raise ValueError("Thing is not saved")
        return await self.remove(thing_id)

    async def _create(self, data: InteractionCreate) -> MutationResult[InteractionResponse]:
        if self.viewer is None:
            raise RuntimeError("Session not loaded")
        if data.thing_id not in self._things:
            # Picked from search rather than the feed
            self.remember_thing(await self.client.get_thing(data.thing_id))
        now = datetime.now(UTC)
        provisional = InteractionResponse(
            id=f"{LOCAL_ID_PREFIX}{uuid.uuid4()}",
            user_id=self.store.user_id,
            user_name=self.viewer.name,
            thing_id=data.thing_id,
            state=data.state,
            visibility=data.visibility,
            rating=data.rating,
            content=data.content,
            photos=data.photos,
            notes=data.notes,
            date=now,
            created_at=now,
        )
        return await self._mutate(
            data.thing_id,
            lambda: self.store.add(provisional),
            lambda: self.client.create_interaction(data),
            self.store.add,
        )

    async def _mutate(
        self,
        thing_id: str,
        apply: Callable[[], Any],
        remote: Callable[[], Awaitable[Any]],
        on_commit: Callable[[Any], Any] | None = None,
    ) -> MutationResult:
        if self._closed:
            raise RuntimeError("Session is closed")
        if thing_id in self.pending:
            raise MutationInProgressError(thing_id)

        def apply_and_refresh() -> None:
            apply()
            self.refresh()

        result: MutationResult = MutationResult()
        self.pending[thing_id] = result
        try:
            await run_optimistic(
                self.store,
                thing_id,
                apply_and_refresh,
                remote,
                on_commit=on_commit,
                result=result,
            )
        finally:
            self.pending.pop(thing_id, None)

        if not self._closed:
            self.refresh()
        logger.debug(
            "Mutation finished", extra={"thing_id": thing_id, "status": result.status.value}
        )
        return result
