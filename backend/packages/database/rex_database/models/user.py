"""
User model definition.

Users are created by the identity provider; this table holds the
application profile keyed by the provider's uid.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """
    Application user profile.

    Attributes:
        id: Identity provider uid.
        name: Display name (denormalized onto interactions and comments).
        username: Unique lowercase handle used for @mentions.
        email: Optional contact email.
        phone_verified: Whether the identity provider verified the phone number.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255))
    phone_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    interactions = relationship(
        "UserThingInteraction", back_populates="user", cascade="all, delete-orphan"
    )
