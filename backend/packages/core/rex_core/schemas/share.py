"""
Share link schemas.
"""

from pydantic import BaseModel


class ShareLinkResponse(BaseModel):
    """Deep link for sharing a thing, plus a ready-made SMS body."""

    thing_id: str
    url: str
    sms_body: str
    sms_url: str


class ShareAcceptResult(BaseModel):
    """Outcome of opening a share link as an authenticated user."""

    thing_id: str
    saved: bool
    followed_sender: bool
