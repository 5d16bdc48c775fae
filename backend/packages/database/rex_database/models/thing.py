"""
Thing model definition.

This module defines the Thing model: the canonical recommendable entity
(book, movie, place, ...) that interactions reference.
"""

from typing import Any

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, generate_uuid


class Thing(Base, TimestampMixin):
    """
    Recommendable entity.

    Things are shared globally; many users hold interactions on one thing.

    Attributes:
        id: Unique thing identifier (UUID).
        title: Display title.
        category: books, movies, places, music or other.
        description: Optional long description.
        image: Optional cover/photo URL.
        item_metadata: Source-specific metadata (author, year, address, ...).
        source: Metadata provider the thing was created from.
        source_id: Provider identifier, unique per source when present.
        created_by: User who first created the thing.
    """

    __tablename__ = "things"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(2000))
    # "metadata" is reserved on declarative classes
    item_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", default=dict, nullable=False)

    source: Mapped[str] = mapped_column(String(32), default="manual", nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(255))

    created_by: Mapped[str | None] = mapped_column(
        String(128), ForeignKey("users.id", ondelete="SET NULL"), index=True
    )

    # Relationships
    interactions = relationship(
        "UserThingInteraction", back_populates="thing", cascade="all, delete-orphan"
    )

    __table_args__ = (UniqueConstraint("source", "source_id", name="uq_thing_source_id"),)
