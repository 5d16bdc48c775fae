"""
Service layer.

Business logic services for the application.
"""

from .comment_service import CommentService
from .feed_service import FeedService
from .interaction_service import InteractionService
from .recommendation_service import RecommendationService
from .share_service import ShareService
from .tag_service import TagService
from .thing_service import ThingService
from .user_service import UserService, load_following_ids

__all__ = [
    "UserService",
    "ThingService",
    "InteractionService",
    "CommentService",
    "RecommendationService",
    "FeedService",
    "ShareService",
    "TagService",
    "load_following_ids",
]
