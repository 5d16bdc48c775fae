"""
Rex Client Package.

HTTP client for the Rex API and a feed session that applies local
changes optimistically.
"""

__version__ = "0.1.0"

from .client import RexClient
from .session import FeedSession, MutationInProgressError

__all__ = ["RexClient", "FeedSession", "MutationInProgressError"]
