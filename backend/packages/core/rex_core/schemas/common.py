"""
Shared enumerations and field types.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator


class Category(str, Enum):
    """Thing category."""

    BOOKS = "books"
    MOVIES = "movies"
    PLACES = "places"
    MUSIC = "music"
    OTHER = "other"


class ThingSource(str, Enum):
    """Metadata provider a thing was created from."""

    GOOGLE_BOOKS = "google_books"
    TMDB = "tmdb"
    GOOGLE_PLACES = "google_places"
    SPOTIFY = "spotify"
    MANUAL = "manual"


class InteractionState(str, Enum):
    """A user's state toward a thing."""

    BUCKET_LIST = "bucketList"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"


class Visibility(str, Enum):
    """Who may see an interaction."""

    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


RATING_MIN = 1
RATING_MAX = 5


def _ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]
