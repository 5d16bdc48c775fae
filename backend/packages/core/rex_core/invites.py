"""
Share links and SMS invite helpers.

Rex never sends SMS itself; it builds the message and an ``sms:`` URL the
client hands to the device.
"""

from urllib.parse import quote, urlencode

_WEBSITE_KEYWORDS = ("website", "app", "blog", "tiktok", "instagram", "youtube", "twitter", "facebook")
_GENERIC_NAMES = frozenset({"friend", "coworker", "family", "someone", "person"})


def should_offer_sms_invite(recommender_name: str) -> bool:
    """
    Return whether a free-text recommender looks like a person worth texting.

    Names that look like a website or app, or a generic word such as
    "friend", are rejected.
    """
    trimmed = (recommender_name or "").strip()
    if len(trimmed) < 2:
        return False

    lowered = trimmed.lower()
    if "." in lowered:
        return False
    if any(keyword in lowered for keyword in _WEBSITE_KEYWORDS):
        return False
    return lowered not in _GENERIC_NAMES


def build_share_url(base_url: str, thing_id: str, sender_id: str) -> str:
    """Build the ``/share/{thing_id}?from=<sender>`` deep link."""
    return f"{base_url.rstrip('/')}/share/{quote(thing_id, safe='')}?{urlencode({'from': sender_id})}"


def _first_name(name: str) -> str:
    parts = (name or "").split()
    return parts[0] if parts else name


def build_sms_body(recipient_name: str, thing_title: str, url: str) -> str:
    """
    Build the invite message sent to the person credited with a recommendation.

    Only the recipient's first name is used.
    """
    return (
        f'Hey {_first_name(recipient_name)}! I just added "{thing_title}" to Rex and said you recommended it. '
        f"Check it out: {url}"
    )


def build_tag_invite_body(recipient_name: str, thing_title: str, url: str) -> str:
    """Build the invite message for someone tagged who is not on Rex yet."""
    return (
        f'Hey {_first_name(recipient_name)}! I tagged you on "{thing_title}" in Rex. '
        f"Join me there: {url}"
    )


def sms_url(body: str) -> str:
    """Return an ``sms:`` URL that opens the device's composer with ``body``."""
    return f"sms:?body={quote(body, safe='')}"
