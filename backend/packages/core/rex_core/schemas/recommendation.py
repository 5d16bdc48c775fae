"""
Recommendation schemas.
"""

from pydantic import BaseModel, ConfigDict

from .common import UTCDateTime


class RecommendationResponse(BaseModel):
    """Recommendation edge response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    from_user_id: str
    to_user_id: str
    thing_id: str
    date: UTCDateTime
    message: str | None = None
