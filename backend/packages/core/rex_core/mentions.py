"""
@mention extraction for comments.
"""

import re

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_mentions(text: str) -> list[str]:
    """
    Return mentioned usernames, lowercased and deduplicated in order of appearance.

    Args:
        text: Comment text.
    """
    seen: dict[str, None] = {}
    for match in MENTION_PATTERN.finditer(text or ""):
        seen.setdefault(match.group(1).lower(), None)
    return list(seen)
