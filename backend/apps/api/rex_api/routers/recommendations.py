"""
Recommendations router.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from rex_core.schemas import RecommendationResponse, UserProfile
from rex_core.services import RecommendationService

from ..dependencies import get_current_user, get_recommendation_service

router = APIRouter()


@router.get("/received")
async def list_received(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    recommendation_service: Annotated[
        RecommendationService, Depends(get_recommendation_service)
    ],
) -> list[RecommendationResponse]:
    """Recommendations made to the caller, newest first."""
    return await recommendation_service.list_received(current_user.id)


@router.get("/sent")
async def list_sent(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    recommendation_service: Annotated[
        RecommendationService, Depends(get_recommendation_service)
    ],
) -> list[RecommendationResponse]:
    """Recommendations made by the caller, newest first."""
    return await recommendation_service.list_sent(current_user.id)
