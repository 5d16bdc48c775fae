"""
Interaction schemas.

Request and response models for a user's state toward a thing.
"""

from pydantic import BaseModel, ConfigDict, Field

from .common import RATING_MAX, RATING_MIN, InteractionState, UTCDateTime, Visibility


class InteractionCreate(BaseModel):
    """
    Save/complete request.

    The server decides between create and update: a user holds at most one
    canonical interaction per thing.
    """

    thing_id: str
    state: InteractionState = InteractionState.BUCKET_LIST
    visibility: Visibility = Visibility.FRIENDS
    rating: int | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    content: str | None = None
    photos: list[str] = Field(default_factory=list)
    notes: str | None = None
    recommended_by_user_id: str | None = None


class InteractionUpdate(BaseModel):
    """Partial interaction update; only fields that are set are applied."""

    state: InteractionState | None = None
    visibility: Visibility | None = None
    rating: int | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    content: str | None = None
    photos: list[str] | None = None
    notes: str | None = None


class InteractionResponse(BaseModel):
    """Interaction response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    user_name: str
    thing_id: str
    state: InteractionState
    visibility: Visibility
    rating: int | None = None
    content: str | None = None
    photos: list[str] = Field(default_factory=list)
    notes: str | None = None
    date: UTCDateTime
    created_at: UTCDateTime
    liked_by: list[str] = Field(default_factory=list)
    comment_count: int = 0

    def redacted_for(self, viewer_id: str) -> "InteractionResponse":
        """Return a copy safe to show to ``viewer_id`` (private notes removed)."""
        if viewer_id == self.user_id or self.notes is None:
            return self
        return self.model_copy(update={"notes": None})
