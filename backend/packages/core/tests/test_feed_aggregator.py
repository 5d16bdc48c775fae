"""Tests for feed aggregation."""

import pytest

from rex_core.feed import InteractionStore, aggregate_feed, average_rating
from rex_core.schemas import InteractionState, Visibility

COMPLETED = InteractionState.COMPLETED
BUCKET_LIST = InteractionState.BUCKET_LIST
IN_PROGRESS = InteractionState.IN_PROGRESS


@pytest.fixture
def things(make_thing):
    return {t.id: t for t in (make_thing("dune", "Dune"), make_thing("t1"), make_thing("t2"), make_thing("t3"))}


def test_empty_input_yields_empty_feed(things) -> None:
    assert aggregate_feed([], things, "v", set()) == []


def test_groups_one_entry_per_thing(make_interaction, things) -> None:
    interactions = [
        make_interaction("v", "t1", minutes=1),
        make_interaction("f", "t1", COMPLETED, rating=5, minutes=2),
        make_interaction("f", "t2", minutes=3),
    ]

    feed = aggregate_feed(interactions, things, "v", {"f"})

    assert sorted(item.thing.id for item in feed) == ["t1", "t2"]
    t1 = next(item for item in feed if item.thing.id == "t1")
    assert len(t1.interactions) == 2


def test_things_without_interactions_never_appear(make_interaction, things) -> None:
    feed = aggregate_feed([make_interaction("v", "t1")], things, "v", set())

    assert [item.thing.id for item in feed] == ["t1"]
    assert all(item.interactions for item in feed)


def test_sorted_by_most_recent_update_descending(make_interaction, things) -> None:
    interactions = [
        make_interaction("v", "t1", minutes=1),
        make_interaction("v", "t2", minutes=10),
        make_interaction("f", "t1", minutes=20),
        make_interaction("v", "t3", minutes=5),
    ]

    feed = aggregate_feed(interactions, things, "v", {"f"})

    assert [item.thing.id for item in feed] == ["t1", "t2", "t3"]
    assert feed[0].most_recent_update == interactions[2].date


def test_ties_keep_first_seen_order(make_interaction, things) -> None:
    """Identical timestamps must not swap positions between renders."""
    interactions = [
        make_interaction("v", "t3", minutes=0),
        make_interaction("v", "t1", minutes=0),
        make_interaction("v", "t2", minutes=0),
    ]

    first = aggregate_feed(interactions, things, "v", set())
    second = aggregate_feed(interactions, things, "v", set())

    assert [item.thing.id for item in first] == ["t3", "t1", "t2"]
    assert [item.thing.id for item in second] == ["t3", "t1", "t2"]


def test_partitions_completed_and_saved(make_interaction, things) -> None:
    interactions = [
        make_interaction("a", "t1", COMPLETED, rating=4),
        make_interaction("b", "t1", BUCKET_LIST),
        make_interaction("c", "t1", IN_PROGRESS),
    ]

    (item,) = aggregate_feed(interactions, things, "v", {"a", "b", "c"})

    assert item.completed_names == ["A"]
    assert item.saved_names == ["B"]
    assert len(item.interactions) == 3


def test_avg_rating_uses_viewer_and_following_only(make_interaction, things) -> None:
    interactions = [
        make_interaction("v", "t1", COMPLETED, rating=5),
        make_interaction("f", "t1", COMPLETED, rating=3),
        # Public but not followed: visible, yet not part of the average
        make_interaction("stranger", "t1", COMPLETED, rating=1, visibility=Visibility.PUBLIC),
        # Saved entries never count toward the average
        make_interaction("g", "t1", BUCKET_LIST, rating=1),
    ]

    (item,) = aggregate_feed(interactions, things, "v", {"f", "g"})

    assert item.avg_rating == pytest.approx(4.0)
    assert len(item.interactions) == 4


def test_avg_rating_is_none_without_qualifying_ratings(make_interaction, things) -> None:
    interactions = [
        make_interaction("f", "t1", COMPLETED),
        make_interaction("v", "t1", BUCKET_LIST),
    ]

    (item,) = aggregate_feed(interactions, things, "v", {"f"})

    assert item.avg_rating is None


def test_average_rating_ignores_non_positive_ratings(make_interaction) -> None:
    group = [
        make_interaction("v", "t1", COMPLETED, rating=0),
        make_interaction("f", "t1", COMPLETED, rating=2),
    ]

    assert average_rating(group, "v", {"f"}) == 2


def test_avg_rating_in_range_and_from_visible_entries_only(make_interaction, things) -> None:
    interactions = [
        make_interaction("f", "t1", COMPLETED, rating=5),
        make_interaction("p", "t1", COMPLETED, rating=1, visibility=Visibility.PRIVATE),
        make_interaction("q", "t2", COMPLETED, rating=1, visibility=Visibility.PRIVATE),
    ]

    feed = aggregate_feed(interactions, things, "v", {"f", "p", "q"})

    # The private ratings are invisible; t2 has nothing visible and disappears
    assert [item.thing.id for item in feed] == ["t1"]
    assert feed[0].avg_rating == 5
    for item in feed:
        assert item.avg_rating is None or 1 <= item.avg_rating <= 5


def test_private_interactions_of_others_never_leak(make_interaction, things) -> None:
    secret = make_interaction("a", "t1", COMPLETED, rating=2, visibility=Visibility.PRIVATE)
    interactions = [secret, make_interaction("a", "t2", visibility=Visibility.PUBLIC)]

    feed = aggregate_feed(interactions, things, "b", {"a"})

    assert all(secret.id not in {i.id for i in item.interactions} for item in feed)
    assert all(secret.id not in {i.id for i in item.completed} for item in feed)


def test_my_interaction_prefers_latest_duplicate(make_interaction, things) -> None:
    older = make_interaction("v", "t1", BUCKET_LIST, minutes=1)
    newer = make_interaction("v", "t1", COMPLETED, rating=4, minutes=2)

    (item,) = aggregate_feed([older, newer], things, "v", set())

    assert item.my_interaction == newer


def test_missing_thing_groups_are_skipped(make_interaction, things) -> None:
    interactions = [make_interaction("v", "deleted-thing"), make_interaction("v", "t1")]

    feed = aggregate_feed(interactions, things, "v", set())

    assert [item.thing.id for item in feed] == ["t1"]


def test_merge_precedence_local_override_wins(make_interaction, things) -> None:
    server = make_interaction("v", "t1", BUCKET_LIST, interaction_id="srv-1")
    store = InteractionStore("v")
    store.add(server.model_copy(update={"state": COMPLETED, "rating": 5}))

    (item,) = aggregate_feed([server], things, "v", set(), overrides=store)

    assert item.my_interaction is not None
    assert item.my_interaction.state == COMPLETED
    assert len(item.interactions) == 1
    assert item.avg_rating == 5


def test_override_replaces_every_same_user_entry(make_interaction, things) -> None:
    dup_a = make_interaction("v", "t1", BUCKET_LIST, minutes=1)
    dup_b = make_interaction("v", "t1", BUCKET_LIST, minutes=2)
    friend = make_interaction("f", "t1", COMPLETED, rating=4, minutes=3)
    store = InteractionStore("v")
    store.add(make_interaction("v", "t1", COMPLETED, rating=2, minutes=4, interaction_id="local"))

    (item,) = aggregate_feed([dup_a, friend, dup_b], things, "v", {"f"}, overrides=store)

    assert [i.id for i in item.interactions] == ["local", friend.id]
    assert item.avg_rating == pytest.approx(3.0)


def test_another_users_store_is_not_applied(make_interaction, things) -> None:
    store = InteractionStore("someone-else")
    store.add(make_interaction("someone-else", "t1", COMPLETED, visibility=Visibility.PRIVATE))

    feed = aggregate_feed([make_interaction("v", "t2")], things, "v", set(), overrides=store)

    assert [item.thing.id for item in feed] == ["t2"]


def test_scenario_followed_friend_completed_dune(make_interaction, things) -> None:
    """V follows F; F completed Dune (4, friends); V has no interaction on Dune."""
    f_dune = make_interaction("f", "dune", COMPLETED, rating=4, visibility=Visibility.FRIENDS)

    (item,) = aggregate_feed([f_dune], things, "v", {"f"})

    assert item.thing.title == "Dune"
    assert item.avg_rating == 4
    assert item.completed == [f_dune]
    assert item.saved == []
    assert item.my_interaction is None


def test_scenario_local_save_survives_stale_refetch(make_interaction, things) -> None:
    """V saved Dune locally; the refetch does not include it yet."""
    store = InteractionStore("v")
    store.add(make_interaction("v", "dune", BUCKET_LIST, interaction_id="local-1"))
    stale_fetch = [make_interaction("f", "dune", COMPLETED, rating=4)]

    (item,) = aggregate_feed(stale_fetch, things, "v", {"f"}, overrides=store)

    assert item.my_interaction is not None
    assert item.my_interaction.state == BUCKET_LIST
    assert [i.user_id for i in item.saved] == ["v"]


def test_scenario_local_save_on_otherwise_empty_feed(make_interaction, things) -> None:
    store = InteractionStore("v")
    store.add(make_interaction("v", "dune", BUCKET_LIST))

    (item,) = aggregate_feed([], things, "v", set(), overrides=store)

    assert item.thing.id == "dune"
    assert item.my_interaction.state == BUCKET_LIST


def test_scenario_deleted_interaction_hidden_before_refetch(make_interaction, things) -> None:
    mine = make_interaction("v", "dune", COMPLETED, rating=5, interaction_id="srv-dune")
    other = make_interaction("v", "t1", interaction_id="srv-t1")
    store = InteractionStore("v")
    store.add(mine)

    store.remove("srv-dune")
    feed = aggregate_feed([mine, other], things, "v", set(), overrides=store)

    assert [item.thing.id for item in feed] == ["t1"]


def test_deleted_server_entry_without_override_is_hidden(make_interaction, things) -> None:
    mine = make_interaction("v", "dune", interaction_id="srv-dune")
    store = InteractionStore("v")

    store.remove("srv-dune", thing_id="dune")

    assert aggregate_feed([mine], things, "v", set(), overrides=store) == []
