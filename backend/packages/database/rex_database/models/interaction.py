"""
UserThingInteraction model definition.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, generate_uuid, utcnow


class UserThingInteraction(Base, TimestampMixin):
    """
    One user's state toward one thing.

    Uniqueness of (user_id, thing_id) is not enforced by the schema; the
    service layer queries before deciding between create and update.

    Attributes:
        id: Unique interaction identifier (UUID).
        user_id: Owner of the interaction.
        user_name: Owner display name, denormalized at write time.
        thing_id: Referenced thing.
        state: bucketList, inProgress or completed.
        visibility: public, friends or private.
        rating: Optional 1-5 rating.
        content: Free-text take.
        photos: Photo URLs.
        notes: Private notes, only ever returned to the owner.
        date: Time of the last state change.
        liked_by: User ids that liked the take.
        comment_count: Denormalized number of comments replying to the take.
    """

    __tablename__ = "user_thing_interactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    thing_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("things.id", ondelete="CASCADE"), nullable=False, index=True
    )

    state: Mapped[str] = mapped_column(String(20), nullable=False)
    visibility: Mapped[str] = mapped_column(String(20), default="friends", nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer)
    content: Mapped[str | None] = mapped_column(Text)
    photos: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    liked_by: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    comment_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    user = relationship("User", back_populates="interactions")
    thing = relationship("Thing", back_populates="interactions")

    __table_args__ = (
        Index("ix_user_thing_interactions_user_thing", "user_id", "thing_id"),
        Index("ix_user_thing_interactions_user_date", "user_id", "date"),
    )
