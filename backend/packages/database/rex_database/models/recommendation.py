"""
Recommendation model definition.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid, utcnow


class Recommendation(Base, TimestampMixin):
    """
    Attribution edge: from_user's action caused to_user to save or complete a thing.

    Attributes:
        id: Unique recommendation identifier (UUID).
        from_user_id: Recommending user.
        to_user_id: Receiving user.
        thing_id: Recommended thing.
        date: When the recommendation was recorded.
        message: Optional message shown with the recommendation.
    """

    __tablename__ = "recommendations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    from_user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    thing_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("things.id", ondelete="CASCADE"), nullable=False, index=True
    )

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    message: Mapped[str | None] = mapped_column(Text)
