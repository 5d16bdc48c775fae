"""
Comment schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import UTCDateTime


class CommentCreate(BaseModel):
    """Comment creation request. Either text or a voice note is required."""

    content: str = Field(default="", max_length=5000)
    interaction_id: str | None = None
    parent_comment_id: str | None = None
    voice_note_url: str | None = None
    voice_note_duration: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_body(self) -> "CommentCreate":
        self.content = self.content.strip()
        if not self.content and not self.voice_note_url:
            raise ValueError("Comment must have text or a voice note")
        return self


class CommentResponse(BaseModel):
    """Comment response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    thing_id: str
    interaction_id: str | None = None
    parent_comment_id: str | None = None
    author_id: str
    author_name: str
    content: str
    created_at: UTCDateTime
    liked_by: list[str] = Field(default_factory=list)
    tagged_users: list[str] = Field(default_factory=list)
    voice_note_url: str | None = None
    voice_note_duration: float | None = None
