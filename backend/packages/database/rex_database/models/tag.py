"""
Tag model definition.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid


class Tag(Base, TimestampMixin):
    """
    A friend tagged on an interaction ("experienced it with").

    Tags on Rex users wait for the tagged user to accept or decline.
    Tags on people without an account carry only a name and email and are
    answered by sharing the thing with them instead.

    Attributes:
        id: Unique tag identifier (UUID).
        interaction_id: Interaction the tag was added to.
        thing_id: The interaction's thing.
        thing_title: Thing title, denormalized for the tag request and invite.
        tagger_id: Owner of the interaction.
        tagger_name: Tagger display name, denormalized at write time.
        tagged_user_id: Tagged Rex user, or None for a non-user.
        tagged_name: Display name of the tagged person.
        tagged_email: Optional email of a tagged non-user.
        state: Interaction state at tagging time; accepting copies it.
        rating: Tagger's rating at tagging time, shown with the request.
        status: pending, accepted or declined.
        responded_at: When the tagged user answered.
    """

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    interaction_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user_thing_interactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    thing_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("things.id", ondelete="CASCADE"), nullable=False
    )
    thing_title: Mapped[str] = mapped_column(String(500), nullable=False)
    tagger_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    tagger_name: Mapped[str] = mapped_column(String(100), nullable=False)
    tagged_user_id: Mapped[str | None] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    tagged_name: Mapped[str] = mapped_column(String(100), nullable=False)
    tagged_email: Mapped[str | None] = mapped_column(String(255))

    state: Mapped[str] = mapped_column(String(20), nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
