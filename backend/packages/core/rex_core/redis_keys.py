"""Redis key templates and TTL constants.

Centralized management of all Redis keys used in the application to prevent
conflicts and make maintenance easier.
"""


class RedisKeys:
    """Redis key templates and helper methods."""

    # ============================================================================
    # Feed Related Keys
    # ============================================================================

    # Aggregated feed payload for one viewer
    # Format: feed_payload:{user_id}
    # TTL: 30 seconds
    FEED_PAYLOAD_TTL = 30

    @staticmethod
    def feed_payload(user_id: str) -> str:
        """
        Get the cached aggregated feed key for a viewer.

        Args:
            user_id: Viewer whose feed is cached.

        Returns:
            Redis key string.
        """
        return f"feed_payload:{user_id}"

