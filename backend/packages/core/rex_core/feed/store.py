"""
Client-side interaction store.

An in-memory overlay of the current user's own interactions. Local
mutations land here first so the feed reflects them before (or without)
a refetch, and so a stale refetch cannot silently overwrite them.

The store is an explicit state container: callers pass it to
``aggregate_feed`` rather than reaching for a module-level singleton.
There is no locking; the last write wins.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from rex_core import get_logger
from rex_core.schemas import InteractionResponse

logger = get_logger(__name__)

# Fields whose equality means the server has caught up with an override
_TRACKED_FIELDS = ("state", "visibility", "rating", "content", "photos", "notes")


@dataclass(frozen=True)
class StoreSnapshot:
    """Pre-mutation state of one thing's entries, used for rollback."""

    thing_id: str
    override: InteractionResponse | None
    removed_ids: frozenset[str] = field(default_factory=frozenset)


class InteractionStore:
    """
    Overlay of one user's interactions, keyed by interaction id.

    At most one override is held per thing; adding a second interaction for
    the same thing under a different id replaces the first.
    """

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        self._items: dict[str, InteractionResponse] = {}
        # Tombstones: interaction id -> thing id (None when unknown)
        self._removed: dict[str, str | None] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, interaction_id: object) -> bool:
        return interaction_id in self._items

    def values(self) -> list[InteractionResponse]:
        return list(self._items.values())

    def get(self, interaction_id: str) -> InteractionResponse | None:
        return self._items.get(interaction_id)

    def get_by_thing_id(self, thing_id: str) -> InteractionResponse | None:
        """Return the local override for (current user, thing), if any."""
        for interaction in self._items.values():
            if interaction.thing_id == thing_id:
                return interaction
        return None

    def is_removed(self, interaction_id: str) -> bool:
        return interaction_id in self._removed

    def add(self, interaction: InteractionResponse) -> None:
        """
        Insert or replace an override (last write wins by id).

        Raises:
            ValueError: If the interaction belongs to another user.
        """
        if interaction.user_id != self.user_id:
            raise ValueError("Interaction belongs to another user")

        for existing_id, existing in list(self._items.items()):
            if existing.thing_id == interaction.thing_id and existing_id != interaction.id:
                del self._items[existing_id]
        self._removed.pop(interaction.id, None)
        self._items[interaction.id] = interaction

    def update(self, interaction_id: str, **fields: Any) -> InteractionResponse | None:
        """
        Shallow-merge ``fields`` into a stored override.

        Unknown ids are a no-op (returns None); an empty patch leaves the
        stored object untouched.

        Raises:
            ValueError: If a field name is not an interaction field.
        """
        current = self._items.get(interaction_id)
        if current is None:
            return None
        if not fields:
            return current

        unknown = set(fields) - set(InteractionResponse.model_fields)
        if unknown:
            raise ValueError(f"Unknown interaction fields: {', '.join(sorted(unknown))}")
        if "id" in fields and fields["id"] != interaction_id:
            raise ValueError("Interaction id cannot be changed")

        merged = InteractionResponse.model_validate({**current.model_dump(), **fields})
        self._items[interaction_id] = merged
        return merged

    def remove(self, interaction_id: str, thing_id: str | None = None) -> InteractionResponse | None:
        """
        Delete an override and hide the id from not-yet-refetched data.

        The tombstone lasts until the next ``sync``; if the server still
        returns the id at that point the interaction reappears.
        """
        removed = self._items.pop(interaction_id, None)
        if removed is not None:
            thing_id = removed.thing_id
        self._removed[interaction_id] = thing_id
        return removed

    def sync(self, fetched: Iterable[InteractionResponse]) -> None:
        """
        Reconcile with freshly fetched server data.

        Overrides the server agrees with are retired; stale server copies
        leave their override in place. Tombstones are cleared.
        """
        fetched_by_id = {i.id: i for i in fetched if i.user_id == self.user_id}
        retired = 0
        for interaction_id, override in list(self._items.items()):
            server_copy = fetched_by_id.get(interaction_id)
            if server_copy is not None and _same_tracked_fields(server_copy, override):
                del self._items[interaction_id]
                retired += 1
        self._removed.clear()
        if retired:
            logger.debug("Retired local overrides", extra={"count": retired})

    def clear(self) -> None:
        self._items.clear()
        self._removed.clear()

    def snapshot(self, thing_id: str) -> StoreSnapshot:
        """Capture the current override and tombstones for one thing."""
        return StoreSnapshot(
            thing_id=thing_id,
            override=self.get_by_thing_id(thing_id),
            removed_ids=frozenset(
                interaction_id
                for interaction_id, removed_thing in self._removed.items()
                if removed_thing == thing_id
            ),
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """Put one thing's entries back to a previously captured snapshot."""
        for interaction_id, interaction in list(self._items.items()):
            if interaction.thing_id == snapshot.thing_id:
                del self._items[interaction_id]
        for interaction_id, removed_thing in list(self._removed.items()):
            if removed_thing == snapshot.thing_id:
                del self._removed[interaction_id]

        if snapshot.override is not None:
            self._items[snapshot.override.id] = snapshot.override
        for interaction_id in snapshot.removed_ids:
            self._removed[interaction_id] = snapshot.thing_id


def _same_tracked_fields(a: InteractionResponse, b: InteractionResponse) -> bool:
    return all(getattr(a, name) == getattr(b, name) for name in _TRACKED_FIELDS)
