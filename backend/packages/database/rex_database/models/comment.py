"""
Comment model definition.
"""

from sqlalchemy import JSON, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid


class Comment(Base, TimestampMixin):
    """
    Comment attached to a thing, optionally replying to one interaction's take.

    Attributes:
        id: Unique comment identifier (UUID).
        thing_id: Thing the comment is attached to.
        interaction_id: Take being replied to, if any.
        parent_comment_id: Parent comment for threaded replies.
        author_id: Comment author.
        author_name: Author display name, denormalized at write time.
        content: Comment text (may be empty for voice-only comments).
        liked_by: User ids that liked the comment.
        tagged_users: Usernames extracted from @mentions.
        voice_note_url: Uploaded voice note URL.
        voice_note_duration: Voice note length in seconds.
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    thing_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("things.id", ondelete="CASCADE"), nullable=False, index=True
    )
    interaction_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("user_thing_interactions.id", ondelete="SET NULL"), index=True
    )
    parent_comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comments.id", ondelete="CASCADE")
    )

    author_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_name: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    liked_by: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    tagged_users: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    voice_note_url: Mapped[str | None] = mapped_column(String(2000))
    voice_note_duration: Mapped[float | None] = mapped_column(Float)
