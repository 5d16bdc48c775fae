"""
Feed aggregation.

Turns a flat list of interactions into one ``FeedThing`` per thing:

1. local overrides replace the viewer's own server entries,
2. entries the viewer may not see are dropped,
3. entries are grouped by thing in first-seen order,
4. derived fields are computed per group,
5. groups are ordered by most recent activity, newest first (stable).

Aggregation is interaction-driven: a thing with no visible interactions
never produces an entry.
"""

from collections.abc import Collection, Iterable, Mapping

from rex_core import get_logger
from rex_core.schemas import FeedThing, InteractionResponse, InteractionState, ThingResponse

from .store import InteractionStore
from .visibility import filter_visible

logger = get_logger(__name__)


def merge_overrides(
    interactions: Iterable[InteractionResponse], store: InteractionStore, viewer_id: str
) -> list[InteractionResponse]:
    """
    Apply the viewer's local overrides to fetched interactions.

    An override for (viewer, thing) takes the position of the first
    same-user entry for that thing and drops any others; overrides with no
    server counterpart are appended. Tombstoned ids are removed.
    """
    local: dict[str, InteractionResponse] = {}
    if store.user_id == viewer_id:
        local = {override.thing_id: override for override in store.values()}

    merged: list[InteractionResponse] = []
    placed: set[str] = set()
    for interaction in interactions:
        if store.is_removed(interaction.id):
            continue
        override = local.get(interaction.thing_id)
        if override is not None and interaction.user_id == viewer_id:
            if interaction.thing_id not in placed:
                merged.append(override)
                placed.add(interaction.thing_id)
            continue
        merged.append(interaction)

    for thing_id, override in local.items():
        if thing_id not in placed:
            merged.append(override)
    return merged


def average_rating(
    group: Iterable[InteractionResponse], viewer_id: str, following: Collection[str]
) -> float | None:
    """
    Mean rating of completed, rated entries by the viewer or people they follow.

    Returns None rather than 0.0 when nothing qualifies.
    """
    ratings = [
        i.rating
        for i in group
        if i.state == InteractionState.COMPLETED
        and i.rating is not None
        and i.rating > 0
        and (i.user_id == viewer_id or i.user_id in following)
    ]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def _pick_my_interaction(
    group: list[InteractionResponse], viewer_id: str
) -> InteractionResponse | None:
    mine = [i for i in group if i.user_id == viewer_id]
    if not mine:
        return None
    # Duplicates are possible in stored data; the latest state change is canonical
    return max(mine, key=lambda i: i.date)


def build_feed_thing(
    thing: ThingResponse,
    group: list[InteractionResponse],
    viewer_id: str,
    following: Collection[str],
) -> FeedThing:
    """Compute the derived fields for one non-empty group."""
    return FeedThing(
        thing=thing,
        interactions=group,
        my_interaction=_pick_my_interaction(group, viewer_id),
        avg_rating=average_rating(group, viewer_id, following),
        most_recent_update=max(i.date or i.created_at for i in group),
        completed=[i for i in group if i.state == InteractionState.COMPLETED],
        saved=[i for i in group if i.state == InteractionState.BUCKET_LIST],
    )


def aggregate_feed(
    interactions: Iterable[InteractionResponse],
    things: Mapping[str, ThingResponse],
    viewer_id: str,
    following: Collection[str],
    overrides: InteractionStore | None = None,
) -> list[FeedThing]:
    """
    Group interactions into feed entries for ``viewer_id``.

    Args:
        interactions: Fetched interactions (may be empty).
        things: Lookup from thing id to thing.
        viewer_id: Requesting user.
        following: User ids the viewer follows.
        overrides: The viewer's local interaction store, if any.

    Returns:
        Feed entries ordered by most recent activity, newest first.
    """
    following_set = set(following)

    if overrides is not None:
        interactions = merge_overrides(interactions, overrides, viewer_id)
    visible = filter_visible(interactions, viewer_id, following_set)

    groups: dict[str, list[InteractionResponse]] = {}
    for interaction in visible:
        groups.setdefault(interaction.thing_id, []).append(interaction)

    feed: list[FeedThing] = []
    for thing_id, group in groups.items():
        thing = things.get(thing_id)
        if thing is None:
            logger.debug("Skipping feed group for missing thing", extra={"thing_id": thing_id})
            continue
        feed.append(build_feed_thing(thing, group, viewer_id, following_set))

    # list.sort is stable with reverse=True: ties keep first-seen order
    feed.sort(key=lambda item: item.most_recent_update, reverse=True)
    return feed
