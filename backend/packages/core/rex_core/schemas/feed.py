"""
Feed schemas.

``FeedThing`` is derived per request and never persisted.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .common import UTCDateTime
from .interaction import InteractionResponse
from .thing import ThingResponse


class FeedThing(BaseModel):
    """One aggregated feed entry: a thing plus the visible activity on it."""

    thing: ThingResponse
    interactions: list[InteractionResponse]
    my_interaction: InteractionResponse | None = None
    avg_rating: float | None = None
    most_recent_update: UTCDateTime
    completed: list[InteractionResponse] = Field(default_factory=list)
    saved: list[InteractionResponse] = Field(default_factory=list)

    @property
    def completed_names(self) -> list[str]:
        return [i.user_name for i in self.completed]

    @property
    def saved_names(self) -> list[str]:
        return [i.user_name for i in self.saved]


class FeedResponse(BaseModel):
    """Aggregated feed for one viewer."""

    items: list[FeedThing]
    generated_at: datetime


class FeedSource(BaseModel):
    """
    Raw, visibility-filtered feed inputs.

    Clients aggregate these locally so their own optimistic overrides can
    replace stale server entries before derived fields are computed.
    """

    viewer_id: str
    following: list[str]
    interactions: list[InteractionResponse]
    things: list[ThingResponse]
