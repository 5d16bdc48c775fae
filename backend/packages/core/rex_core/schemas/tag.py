"""
Tag schemas.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .common import InteractionState, UTCDateTime
from .interaction import InteractionResponse


class TagStatus(str, Enum):
    """Answer to a tag request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class NonUserTag(BaseModel):
    """Someone without a Rex account, tagged by name."""

    name: str = Field(..., max_length=100)
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be blank")
        return value


class TagCreate(BaseModel):
    """Tag request: Rex users by id, everyone else by name."""

    user_ids: list[str] = Field(default_factory=list)
    non_users: list[NonUserTag] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_someone(self) -> "TagCreate":
        # Keep first occurrence order
        self.user_ids = list(dict.fromkeys(self.user_ids))
        if not self.user_ids and not self.non_users:
            raise ValueError("Tag at least one person")
        return self


class TagResponse(BaseModel):
    """Tag response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    interaction_id: str
    thing_id: str
    thing_title: str
    tagger_id: str
    tagger_name: str
    tagged_user_id: str | None = None
    tagged_name: str
    tagged_email: str | None = None
    state: InteractionState
    rating: int | None = None
    status: TagStatus
    created_at: UTCDateTime
    responded_at: UTCDateTime | None = None
    # Share link and message for tagged non-users; filled in by the API
    invite_url: str | None = None
    invite_sms_body: str | None = None

    def redacted_for(self, viewer_id: str) -> "TagResponse":
        """Return a copy safe to show to ``viewer_id`` (non-user email removed)."""
        if viewer_id == self.tagger_id or self.tagged_email is None:
            return self
        return self.model_copy(update={"tagged_email": None})


class TagAcceptResult(BaseModel):
    """An accepted tag and the interaction it gave the tagged user."""

    tag: TagResponse
    interaction: InteractionResponse
