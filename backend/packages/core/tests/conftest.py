"""Fixtures for core package tests."""

import itertools
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from rex_core.schemas import (
    Category,
    InteractionResponse,
    InteractionState,
    ThingResponse,
    Visibility,
)

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_interaction() -> Callable[..., InteractionResponse]:
    """Factory for interaction records; ``minutes`` offsets the timestamps from T0."""
    counter = itertools.count(1)

    def _make(
        user_id: str,
        thing_id: str,
        state: InteractionState = InteractionState.BUCKET_LIST,
        *,
        visibility: Visibility = Visibility.FRIENDS,
        rating: int | None = None,
        minutes: int = 0,
        interaction_id: str | None = None,
        notes: str | None = None,
    ) -> InteractionResponse:
        at = T0 + timedelta(minutes=minutes)
        return InteractionResponse(
            id=interaction_id or f"i{next(counter)}",
            user_id=user_id,
            user_name=user_id.title(),
            thing_id=thing_id,
            state=state,
            visibility=visibility,
            rating=rating,
            notes=notes,
            date=at,
            created_at=at,
        )

    return _make


@pytest.fixture
def make_thing() -> Callable[..., ThingResponse]:
    """Factory for things."""

    def _make(thing_id: str, title: str | None = None, category: Category = Category.BOOKS):
        return ThingResponse(id=thing_id, title=title or thing_id.title(), category=category, created_at=T0)

    return _make
