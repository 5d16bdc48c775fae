"""Tests for the interaction service."""

import pytest
import pytest_asyncio

from rex_core.schemas import (
    Category,
    InteractionCreate,
    InteractionState,
    InteractionUpdate,
    ThingCreate,
    Visibility,
)
from rex_core.services import InteractionService, RecommendationService, ThingService, UserService


@pytest_asyncio.fixture
async def dune(db_session, make_user):
    owner = await make_user("owner", "Owner", "owner")
    thing, _ = await ThingService(db_session).create_thing(
        ThingCreate(title="Dune", category=Category.BOOKS), created_by=owner.id
    )
    return thing


@pytest.mark.asyncio
async def test_save_creates_then_updates(db_session, make_user, dune) -> None:
    viewer = await make_user("v", "Viewer", "viewer")
    service = InteractionService(db_session)

    saved, created = await service.save_interaction(viewer, InteractionCreate(thing_id=dune.id))
    assert created is True
    assert saved.state == InteractionState.BUCKET_LIST
    assert saved.visibility == Visibility.FRIENDS
    assert saved.user_name == "Viewer"

    completed, created = await service.save_interaction(
        viewer,
        InteractionCreate(thing_id=dune.id, state=InteractionState.COMPLETED, rating=4),
    )
    assert created is False
    assert completed.id == saved.id
    assert completed.state == InteractionState.COMPLETED
    assert completed.rating == 4
    # Visibility was not part of the second request and is left alone
    assert completed.visibility == Visibility.FRIENDS
    assert completed.date >= saved.date


@pytest.mark.asyncio
async def test_save_unknown_thing(db_session, make_user) -> None:
    viewer = await make_user("v", "Viewer", "viewer")

    with pytest.raises(ValueError, match="Thing not found"):
        await InteractionService(db_session).save_interaction(
            viewer, InteractionCreate(thing_id="missing")
        )


@pytest.mark.asyncio
async def test_save_with_recommender_records_edge(db_session, make_user, dune) -> None:
    viewer = await make_user("v", "Viewer", "viewer")
    friend = await make_user("f", "Friend", "friend")

    await InteractionService(db_session).save_interaction(
        viewer, InteractionCreate(thing_id=dune.id, recommended_by_user_id=friend.id)
    )

    recommenders = await RecommendationService(db_session).get_recommenders(viewer.id, dune.id)
    assert [u.id for u in recommenders] == ["f"]

    other = await make_user("o", "Other", "other")
    with pytest.raises(ValueError, match="Recommender not found"):
        await InteractionService(db_session).save_interaction(
            other, InteractionCreate(thing_id=dune.id, recommended_by_user_id="ghost")
        )


@pytest.mark.asyncio
async def test_update_requires_owner(db_session, make_user, dune) -> None:
    viewer = await make_user("v", "Viewer", "viewer")
    service = InteractionService(db_session)
    saved, _ = await service.save_interaction(viewer, InteractionCreate(thing_id=dune.id))

    with pytest.raises(PermissionError):
        await service.update_interaction(saved.id, "someone-else", InteractionUpdate(rating=1))

    updated = await service.update_interaction(
        saved.id, viewer.id, InteractionUpdate(content="Loved it", notes="lend to mum")
    )
    assert updated.content == "Loved it"
    assert updated.state == InteractionState.BUCKET_LIST


@pytest.mark.asyncio
async def test_delete_interaction(db_session, make_user, dune) -> None:
    viewer = await make_user("v", "Viewer", "viewer")
    service = InteractionService(db_session)
    saved, _ = await service.save_interaction(viewer, InteractionCreate(thing_id=dune.id))

    with pytest.raises(PermissionError):
        await service.delete_interaction(saved.id, "owner")

    deleted = await service.delete_interaction(saved.id, viewer.id)
    assert deleted.id == saved.id
    assert await service.get_user_interaction(viewer.id, dune.id) is None
    with pytest.raises(ValueError):
        await service.delete_interaction(saved.id, viewer.id)


@pytest.mark.asyncio
async def test_list_user_interactions_respects_visibility(db_session, make_user, dune) -> None:
    owner = await make_user("a", "Alice", "alice")
    follower = await make_user("b", "Bob", "bob")
    stranger = await make_user("c", "Carol", "carol")
    await UserService(db_session).follow(follower.id, owner.id)

    things = ThingService(db_session)
    private_thing, _ = await things.create_thing(
        ThingCreate(title="Diary", category=Category.OTHER), created_by=owner.id
    )
    service = InteractionService(db_session)
    await service.save_interaction(owner, InteractionCreate(thing_id=dune.id, notes="secret"))
    await service.save_interaction(
        owner, InteractionCreate(thing_id=private_thing.id, visibility=Visibility.PRIVATE)
    )

    own_view = await service.list_user_interactions(owner.id, owner.id)
    follower_view = await service.list_user_interactions(owner.id, follower.id)
    stranger_view = await service.list_user_interactions(owner.id, stranger.id)

    assert len(own_view) == 2
    assert [i.thing_id for i in follower_view] == [dune.id]
    assert follower_view[0].notes is None
    assert stranger_view == []


@pytest.mark.asyncio
async def test_toggle_like(db_session, make_user, dune) -> None:
    owner = await make_user("a", "Alice", "alice")
    fan = await make_user("b", "Bob", "bob")
    stranger = await make_user("c", "Carol", "carol")
    await UserService(db_session).follow(fan.id, owner.id)
    service = InteractionService(db_session)
    take, _ = await service.save_interaction(owner, InteractionCreate(thing_id=dune.id))

    liked = await service.toggle_like(take.id, fan.id)
    assert liked.liked_by == ["b"]
    unliked = await service.toggle_like(take.id, fan.id)
    assert unliked.liked_by == []

    with pytest.raises(ValueError):
        await service.toggle_like(take.id, stranger.id)


@pytest.mark.asyncio
async def test_list_thing_interactions(db_session, make_user, dune) -> None:
    a = await make_user("a", "Alice", "alice")
    b = await make_user("b", "Bob", "bob")
    service = InteractionService(db_session)
    await service.save_interaction(a, InteractionCreate(thing_id=dune.id, visibility=Visibility.PUBLIC))
    await service.save_interaction(b, InteractionCreate(thing_id=dune.id))

    visible = await service.list_thing_interactions(dune.id, "viewer-without-follows")

    assert [i.user_id for i in visible] == ["a"]
