"""
API routers package.
"""

from . import comments, feed, interactions, recommendations, share, tags, things, users

__all__ = ["users", "things", "interactions", "comments", "recommendations", "feed", "share", "tags"]
