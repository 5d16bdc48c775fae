"""
Pydantic schemas for API requests and responses.
"""

from .comment import CommentCreate, CommentResponse
from .common import (
    RATING_MAX,
    RATING_MIN,
    Category,
    InteractionState,
    ThingSource,
    Visibility,
)
from .feed import FeedResponse, FeedSource, FeedThing
from .interaction import InteractionCreate, InteractionResponse, InteractionUpdate
from .recommendation import RecommendationResponse
from .share import ShareAcceptResult, ShareLinkResponse
from .tag import NonUserTag, TagAcceptResult, TagCreate, TagResponse, TagStatus
from .thing import ThingCreate, ThingResponse
from .user import ProfileCreate, ProfileUpdate, UserProfile, UserResponse

__all__ = [
    # Enums
    "Category",
    "ThingSource",
    "InteractionState",
    "Visibility",
    "RATING_MIN",
    "RATING_MAX",
    # User
    "UserResponse",
    "UserProfile",
    "ProfileCreate",
    "ProfileUpdate",
    # Thing
    "ThingCreate",
    "ThingResponse",
    # Interaction
    "InteractionCreate",
    "InteractionUpdate",
    "InteractionResponse",
    # Comment
    "CommentCreate",
    "CommentResponse",
    # Recommendation
    "RecommendationResponse",
    # Feed
    "FeedThing",
    "FeedResponse",
    "FeedSource",
    # Share
    "ShareLinkResponse",
    "ShareAcceptResult",
    # Tag
    "TagStatus",
    "NonUserTag",
    "TagCreate",
    "TagResponse",
    "TagAcceptResult",
]
