"""
Feed aggregation and client-side reconciliation.
"""

from .aggregator import aggregate_feed, average_rating, build_feed_thing, merge_overrides
from .optimistic import MutationResult, MutationStatus, run_optimistic
from .store import InteractionStore, StoreSnapshot
from .visibility import can_view, filter_visible

__all__ = [
    "aggregate_feed",
    "average_rating",
    "build_feed_thing",
    "merge_overrides",
    "InteractionStore",
    "StoreSnapshot",
    "MutationResult",
    "MutationStatus",
    "run_optimistic",
    "can_view",
    "filter_visible",
]
