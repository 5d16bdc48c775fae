"""
Things router.

Provides endpoints for creating and searching things, and for the
activity attached to one thing: interactions, comments, recommenders
and share links.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from rex_core.invites import build_share_url, build_sms_body, sms_url
from rex_core.schemas import (
    Category,
    CommentCreate,
    CommentResponse,
    InteractionResponse,
    ShareLinkResponse,
    ThingCreate,
    ThingResponse,
    UserProfile,
    UserResponse,
)
from rex_core.services import (
    CommentService,
    InteractionService,
    RecommendationService,
    ThingService,
)

from ..config import settings
from ..dependencies import (
    get_comment_service,
    get_current_user,
    get_interaction_service,
    get_recommendation_service,
    get_redis_pool,
    get_thing_service,
)
from ..feed_cache import refresh_after_write

router = APIRouter()


async def _require_thing(thing_service: ThingService, thing_id: str) -> ThingResponse:
    try:
        return await thing_service.get_thing(thing_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None


@router.post("")
async def create_thing(
    data: ThingCreate,
    response: Response,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    thing_service: Annotated[ThingService, Depends(get_thing_service)],
) -> ThingResponse:
    """
    Create a thing, or return the existing one with the same source id.

    Returns:
        The thing; 201 when created, 200 when reused.
    """
    thing, created = await thing_service.create_thing(data, created_by=current_user.id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return thing


@router.get("")
async def search_things(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    thing_service: Annotated[ThingService, Depends(get_thing_service)],
    q: Annotated[str | None, Query(max_length=200)] = None,
    category: Category | None = None,
) -> list[ThingResponse]:
    """Search things by title and category."""
    return await thing_service.search_things(q, category)


@router.get("/{thing_id}")
async def get_thing(
    thing_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    thing_service: Annotated[ThingService, Depends(get_thing_service)],
) -> ThingResponse:
    """
    Get a thing.

    Raises:
        HTTPException: If thing not found.
    """
    return await _require_thing(thing_service, thing_id)


@router.get("/{thing_id}/interactions")
async def list_thing_interactions(
    thing_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    thing_service: Annotated[ThingService, Depends(get_thing_service)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
) -> list[InteractionResponse]:
    """List the interactions on a thing the caller may see."""
    await _require_thing(thing_service, thing_id)
    return await interaction_service.list_thing_interactions(
        thing_id, current_user.id, current_user.following
    )


@router.get("/{thing_id}/recommenders")
async def list_recommenders(
    thing_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    recommendation_service: Annotated[
        RecommendationService, Depends(get_recommendation_service)
    ],
) -> list[UserResponse]:
    """Users who recommended this thing to the caller."""
    return await recommendation_service.get_recommenders(current_user.id, thing_id)


@router.get("/{thing_id}/share-link")
async def get_share_link(
    thing_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    thing_service: Annotated[ThingService, Depends(get_thing_service)],
    to_name: Annotated[str | None, Query(max_length=100)] = None,
) -> ShareLinkResponse:
    """
    Build a share link for a thing, plus an SMS body addressed to ``to_name``.
    """
    thing = await _require_thing(thing_service, thing_id)
    url = build_share_url(settings.app_base_url, thing.id, current_user.id)
    body = build_sms_body(to_name or "there", thing.title, url)
    return ShareLinkResponse(thing_id=thing.id, url=url, sms_body=body, sms_url=sms_url(body))


@router.get("/{thing_id}/comments")
async def list_comments(
    thing_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
) -> list[CommentResponse]:
    """List comments on a thing written by the caller or people they follow."""
    return await comment_service.list_comments(thing_id, current_user.id, current_user.following)


@router.post("/{thing_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    thing_id: str,
    data: CommentCreate,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> CommentResponse:
    """
    Comment on a thing, optionally replying to a take.

    Raises:
        HTTPException: If the thing, interaction or parent comment is not found.
    """
    try:
        comment = await comment_service.create_comment(thing_id, current_user, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None

    owners: list[str] = []
    if comment.interaction_id:
        target = await interaction_service.get_interaction(comment.interaction_id)
        owners.append(target.user_id)
    await refresh_after_write(redis, current_user.id, *owners)
    return comment
