"""
Database models package.

This module exports all SQLAlchemy models for the Rex application.
"""

from .base import Base, TimestampMixin
from .comment import Comment
from .follow import UserFollow
from .interaction import UserThingInteraction
from .recommendation import Recommendation
from .tag import Tag
from .thing import Thing
from .user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserFollow",
    "Thing",
    "UserThingInteraction",
    "Comment",
    "Recommendation",
    "Tag",
]
