"""
Tags router.

Tag requests addressed to the caller: list, view, accept and decline.
Tagging people on an interaction lives in the interactions router.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends, HTTPException, status

from rex_core.invites import build_share_url, build_tag_invite_body
from rex_core.schemas import TagAcceptResult, TagResponse, TagStatus, UserProfile
from rex_core.services import TagService

from ..config import settings
from ..dependencies import get_current_user, get_redis_pool, get_tag_service
from ..feed_cache import refresh_after_write

router = APIRouter()


def with_invite(tag: TagResponse) -> TagResponse:
    """Attach the share link and SMS body for a tagged non-user."""
    if tag.tagged_user_id is not None:
        return tag
    url = build_share_url(settings.app_base_url, tag.thing_id, tag.tagger_id)
    body = build_tag_invite_body(tag.tagged_name, tag.thing_title, url)
    return tag.model_copy(update={"invite_url": url, "invite_sms_body": body})


async def _get_pending_tag(tag_service: TagService, tag_id: str, user_id: str) -> TagResponse:
    try:
        tag = await tag_service.get_tag(tag_id, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None

    if tag.tagged_user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to answer this tag"
        )
    if tag.status != TagStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Tag already answered")
    return tag


@router.get("/pending")
async def list_pending_tags(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
) -> list[TagResponse]:
    """List tag requests waiting for the caller's answer."""
    return await tag_service.list_pending(current_user.id)


@router.get("/{tag_id}")
async def get_tag(
    tag_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
) -> TagResponse:
    """
    Get a tag. Only the tagger and the tagged user may see it.

    Raises:
        HTTPException: 404 if not found, 403 for anyone else.
    """
    try:
        tag = await tag_service.get_tag(tag_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None
    return with_invite(tag)


@router.post("/{tag_id}/accept")
async def accept_tag(
    tag_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> TagAcceptResult:
    """
    Accept a tag, adding the thing to the caller's list in the tagged state.

    Raises:
        HTTPException: 404 if not found, 403 if not addressed to the caller,
            409 if already answered.
    """
    await _get_pending_tag(tag_service, tag_id, current_user.id)
    result = await tag_service.accept_tag(tag_id, current_user)
    await refresh_after_write(redis, current_user.id)
    return result


@router.post("/{tag_id}/decline")
async def decline_tag(
    tag_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
) -> TagResponse:
    """
    Decline a tag.

    Raises:
        HTTPException: 404 if not found, 403 if not addressed to the caller,
            409 if already answered.
    """
    await _get_pending_tag(tag_service, tag_id, current_user.id)
    return await tag_service.decline_tag(tag_id, current_user.id)
