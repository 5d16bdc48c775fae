"""Tests for interaction visibility rules."""

import pytest

from rex_core.feed.visibility import can_view, filter_visible
from rex_core.schemas import Visibility


@pytest.mark.parametrize(
    ("visibility", "following", "expected"),
    [
        (Visibility.PUBLIC, set(), True),
        (Visibility.FRIENDS, {"owner"}, True),
        (Visibility.FRIENDS, set(), False),
        (Visibility.PRIVATE, {"owner"}, False),
    ],
)
def test_can_view_for_other_viewers(visibility, following, expected) -> None:
    """Other viewers see public always, friends only when following the owner, private never."""
    assert can_view("owner", visibility, "viewer", following) is expected


@pytest.mark.parametrize("visibility", list(Visibility))
def test_owner_always_sees_own_records(visibility) -> None:
    assert can_view("owner", visibility, "owner", set()) is True


def test_can_view_accepts_raw_strings() -> None:
    """Stored rows carry plain strings; they are interpreted like the enum."""
    assert can_view("owner", "friends", "viewer", ["owner"]) is True
    assert can_view("owner", "private", "viewer", ["owner"]) is False


def test_following_is_directional(make_interaction) -> None:
    """B following A does not let A see B's friends-only records."""
    b_take = make_interaction("b", "t1", visibility=Visibility.FRIENDS)

    # A follows nobody
    assert filter_visible([b_take], "a", set()) == []
    # B follows A; that grants B access to A's records, not the reverse
    a_take = make_interaction("a", "t1", visibility=Visibility.FRIENDS)
    assert filter_visible([a_take], "b", {"a"}) == [a_take]


def test_filter_visible_keeps_input_order(make_interaction) -> None:
    records = [
        make_interaction("f", "t1", visibility=Visibility.FRIENDS),
        make_interaction("x", "t2", visibility=Visibility.PRIVATE),
        make_interaction("y", "t3", visibility=Visibility.PUBLIC),
        make_interaction("v", "t4", visibility=Visibility.PRIVATE),
    ]

    visible = filter_visible(records, "v", {"f"})

    assert [i.thing_id for i in visible] == ["t1", "t3", "t4"]


def test_private_notes_are_stripped_for_other_viewers(make_interaction) -> None:
    mine = make_interaction("v", "t1", notes="gift idea")
    theirs = make_interaction("f", "t1", notes="for book club", visibility=Visibility.PUBLIC)

    visible = filter_visible([mine, theirs], "v", set())

    assert visible[0].notes == "gift idea"
    assert visible[1].notes is None
    # The source record is not mutated
    assert theirs.notes == "for book club"
