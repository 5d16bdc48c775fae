"""
Interactions router.

Provides endpoints for saving, completing, editing, removing and liking
interactions, and for tagging the people the owner did them with.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from rex_core.schemas import (
    InteractionCreate,
    InteractionResponse,
    InteractionState,
    InteractionUpdate,
    TagCreate,
    TagResponse,
    UserProfile,
)
from rex_core.services import InteractionService, TagService

from ..dependencies import (
    get_current_user,
    get_interaction_service,
    get_redis_pool,
    get_tag_service,
)
from ..feed_cache import refresh_after_write
from .tags import with_invite

router = APIRouter()


@router.get("")
async def list_interactions(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    user_id: str | None = None,
    state: InteractionState | None = None,
) -> list[InteractionResponse]:
    """
    List a user's interactions (the caller's own by default).

    Args:
        current_user: Current authenticated user.
        interaction_service: Interaction service.
        user_id: Whose interactions to list.
        state: Optional state filter.

    Returns:
        Interactions visible to the caller, newest first.
    """
    return await interaction_service.list_user_interactions(
        user_id or current_user.id, current_user.id, state
    )


@router.post("")
async def save_interaction(
    data: InteractionCreate,
    response: Response,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> InteractionResponse:
    """
    Save or complete a thing.

    Returns:
        The interaction; 201 when created, 200 when an existing one was updated.

    Raises:
        HTTPException: If the thing or credited recommender is not found.
    """
    try:
        interaction, created = await interaction_service.save_interaction(current_user, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    await refresh_after_write(redis, current_user.id)
    return interaction


@router.patch("/{interaction_id}")
async def update_interaction(
    interaction_id: str,
    data: InteractionUpdate,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> InteractionResponse:
    """
    Edit an interaction's state, rating, take, photos, notes or visibility.

    Raises:
        HTTPException: 404 if not found, 403 if owned by someone else.
    """
    try:
        interaction = await interaction_service.update_interaction(
            interaction_id, current_user.id, data
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None

    await refresh_after_write(redis, current_user.id)
    return interaction


@router.delete("/{interaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interaction(
    interaction_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
    confirm: Annotated[bool, Query()] = False,
) -> None:
    """
    Remove an interaction. Requires ``confirm=true``.

    Raises:
        HTTPException: 400 without confirmation, 404 if not found, 403 if
            owned by someone else.
    """
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Deletion must be confirmed"
        )
    try:
        await interaction_service.delete_interaction(interaction_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None

    await refresh_after_write(redis, current_user.id)


@router.post("/{interaction_id}/like")
async def like_interaction(
    interaction_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    interaction_service: Annotated[InteractionService, Depends(get_interaction_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> InteractionResponse:
    """
    Toggle the caller's like on an interaction.

    Raises:
        HTTPException: If the interaction is not found or not visible.
    """
    try:
        interaction = await interaction_service.toggle_like(interaction_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None

    await refresh_after_write(redis, current_user.id, interaction.user_id)
    return interaction


@router.post("/{interaction_id}/tags", status_code=status.HTTP_201_CREATED)
async def tag_people(
    interaction_id: str,
    data: TagCreate,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
) -> list[TagResponse]:
    """
    Tag the people the caller experienced a thing with.

    Tagged non-users come back with a share link and SMS body to invite them.

    Raises:
        HTTPException: 400 when tagging yourself, 404 if the interaction or a
            user is not found, 403 if the interaction is someone else's.
    """
    if current_user.id in data.user_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot tag yourself")
    try:
        tags = await tag_service.create_tags(interaction_id, current_user, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None
    return [with_invite(t) for t in tags]


@router.get("/{interaction_id}/tags")
async def list_tags(
    interaction_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    tag_service: Annotated[TagService, Depends(get_tag_service)],
) -> list[TagResponse]:
    """
    List the people tagged on an interaction.

    Raises:
        HTTPException: If the interaction is not found or not visible.
    """
    try:
        tags = await tag_service.list_interaction_tags(interaction_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    return [with_invite(t) if t.tagger_id == current_user.id else t for t in tags]
