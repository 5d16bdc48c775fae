"""
Declarative base and shared column mixins.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def generate_uuid() -> str:
    """Generate a string UUID4 primary key."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for all Rex models."""

    type_annotation_map = {dict[str, Any]: JSONType}


class TimestampMixin:
    """Adds created_at / updated_at columns maintained on insert and update."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
