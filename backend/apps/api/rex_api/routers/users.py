"""
Users router.

Provides endpoints for profile completion and updates, user lookup and
the follow graph.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends, HTTPException, Query, status

from rex_core.auth import TokenData
from rex_core.schemas import ProfileCreate, ProfileUpdate, UserProfile, UserResponse
from rex_core.services import UserService

from ..dependencies import get_current_user, get_redis_pool, get_token_data, get_user_service
from ..feed_cache import invalidate_feed

router = APIRouter()


@router.get("/me")
async def get_me(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> UserProfile:
    """
    Get the authenticated user's profile.

    Returns:
        Profile including the following list.
    """
    return current_user


@router.post("/me", status_code=status.HTTP_201_CREATED)
async def create_me(
    data: ProfileCreate,
    token_data: Annotated[TokenData, Depends(get_token_data)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserProfile:
    """
    Complete the profile of a newly signed-up identity.

    Args:
        data: Name and optional username and email.
        token_data: Verified bearer token claims.
        user_service: User service.

    Returns:
        Created profile.

    Raises:
        HTTPException: 409 if the profile exists or the username is taken.
    """
    try:
        return await user_service.create_profile(
            token_data.sub, data, phone_verified=token_data.phone_verified
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None


@router.patch("/me")
async def update_me(
    data: ProfileUpdate,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserProfile:
    """
    Update the authenticated user's name or username.

    Raises:
        HTTPException: 409 if the username is taken.
    """
    try:
        return await user_service.update_profile(current_user.id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None


@router.get("/search")
async def search_users(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    q: Annotated[str, Query(min_length=1, max_length=100)],
) -> list[UserResponse]:
    """Search users by name or username."""
    return await user_service.search_users(q)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """
    Get a user's public profile.

    Raises:
        HTTPException: If user not found.
    """
    try:
        return await user_service.get_user(user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None


@router.post("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def follow_user(
    user_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> None:
    """
    Follow a user.

    Raises:
        HTTPException: 400 when following oneself, 404 if user not found.
    """
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")
    try:
        await user_service.follow(current_user.id, user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    await invalidate_feed(redis, current_user.id)


@router.delete("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(
    user_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
) -> None:
    """Stop following a user."""
    await user_service.unfollow(current_user.id, user_id)
    await invalidate_feed(redis, current_user.id)
