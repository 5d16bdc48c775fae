"""Tests for the client-side interaction store."""

import pytest

from rex_core.feed import InteractionStore
from rex_core.schemas import InteractionState, Visibility


@pytest.fixture
def store() -> InteractionStore:
    return InteractionStore("v")


def test_round_trip_by_thing_id(store, make_interaction) -> None:
    """What was written is what is read back for (user, thing)."""
    written = make_interaction(
        "v", "dune", InteractionState.COMPLETED, rating=4, visibility=Visibility.PUBLIC
    )
    store.add(written)

    read = store.get_by_thing_id("dune")

    assert read is not None
    assert (read.state, read.rating, read.visibility) == (
        InteractionState.COMPLETED,
        4,
        Visibility.PUBLIC,
    )


def test_get_by_thing_id_unknown_returns_none(store) -> None:
    assert store.get_by_thing_id("nothing") is None


def test_add_is_last_write_wins_by_id(store, make_interaction) -> None:
    store.add(make_interaction("v", "dune", interaction_id="x"))
    store.add(make_interaction("v", "dune", InteractionState.COMPLETED, interaction_id="x"))

    assert len(store) == 1
    assert store.get("x").state == InteractionState.COMPLETED


def test_add_replaces_same_thing_under_new_id(store, make_interaction) -> None:
    """A provisional local id is replaced once the server id is known."""
    store.add(make_interaction("v", "dune", interaction_id="local-1"))
    store.add(make_interaction("v", "dune", interaction_id="srv-1"))

    assert "local-1" not in store
    assert store.get_by_thing_id("dune").id == "srv-1"


def test_add_rejects_other_users(store, make_interaction) -> None:
    with pytest.raises(ValueError):
        store.add(make_interaction("someone-else", "dune"))


def test_empty_update_is_identity(store, make_interaction) -> None:
    original = make_interaction("v", "dune", notes="gift")
    store.add(original)
    before = original.model_dump_json()

    result = store.update(original.id)

    assert result is original
    assert store.get(original.id) is original
    assert store.get(original.id).model_dump_json() == before


def test_update_unknown_id_is_noop(store) -> None:
    assert store.update("missing", rating=5) is None
    assert len(store) == 0


def test_update_merges_fields(store, make_interaction) -> None:
    store.add(make_interaction("v", "dune", interaction_id="x"))

    updated = store.update("x", state=InteractionState.COMPLETED, rating=5)

    assert updated.state == InteractionState.COMPLETED
    assert updated.rating == 5
    assert updated.thing_id == "dune"


def test_update_rejects_unknown_fields(store, make_interaction) -> None:
    store.add(make_interaction("v", "dune", interaction_id="x"))

    with pytest.raises(ValueError):
        store.update("x", colour="red")


def test_remove_tombstones_until_sync(store, make_interaction) -> None:
    server_copy = make_interaction("v", "dune", interaction_id="x")
    store.add(server_copy)

    store.remove("x")

    assert store.get_by_thing_id("dune") is None
    assert store.is_removed("x")

    # A refetch that still contains the id makes it visible again
    store.sync([server_copy])
    assert not store.is_removed("x")


def test_sync_retires_overrides_the_server_caught_up_with(store, make_interaction) -> None:
    local = make_interaction("v", "dune", InteractionState.COMPLETED, rating=4, interaction_id="x")
    store.add(local)

    store.sync([local.model_copy(update={"comment_count": 3})])

    assert store.get_by_thing_id("dune") is None


def test_sync_keeps_overrides_over_stale_data(store, make_interaction) -> None:
    local = make_interaction("v", "dune", InteractionState.COMPLETED, interaction_id="x")
    store.add(local)

    store.sync([local.model_copy(update={"state": InteractionState.BUCKET_LIST})])
    store.sync([])

    assert store.get_by_thing_id("dune") is local


def test_snapshot_restore_is_scoped_to_one_thing(store, make_interaction) -> None:
    dune = make_interaction("v", "dune", interaction_id="a")
    other = make_interaction("v", "other", interaction_id="b")
    store.add(dune)
    snapshot = store.snapshot("dune")

    store.update("a", rating=2)
    store.add(other)
    store.restore(snapshot)

    assert store.get("a") is dune
    assert store.get("b") is other


def test_restore_brings_back_removed_entry(store, make_interaction) -> None:
    dune = make_interaction("v", "dune", interaction_id="a")
    store.add(dune)
    snapshot = store.snapshot("dune")

    store.remove("a")
    store.restore(snapshot)

    assert store.get_by_thing_id("dune") is dune
    assert not store.is_removed("a")
