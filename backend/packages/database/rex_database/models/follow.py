"""
Follow graph model definition.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, generate_uuid


class UserFollow(Base, TimestampMixin):
    """
    Directed follow edge: follower_id follows followee_id.

    Friends-visibility is granted along this edge only (a followee can see
    nothing extra of the follower).
    """

    __tablename__ = "user_follows"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    follower_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    followee_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("follower_id", "followee_id", name="uq_user_follow_pair"),
    )
