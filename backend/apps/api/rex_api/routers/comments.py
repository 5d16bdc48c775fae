"""
Comments router.

Listing and creating comments lives under ``/api/things/{id}/comments``;
this router handles operations on a single comment.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from rex_core.schemas import CommentResponse, UserProfile
from rex_core.services import CommentService

from ..dependencies import get_comment_service, get_current_user

router = APIRouter()


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
    confirm: Annotated[bool, Query()] = False,
) -> None:
    """
    Delete one of the caller's comments. Requires ``confirm=true``.

    Raises:
        HTTPException: 400 without confirmation, 404 if not found, 403 if
            written by someone else.
    """
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Deletion must be confirmed"
        )
    try:
        await comment_service.delete_comment(comment_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None


@router.post("/{comment_id}/like")
async def like_comment(
    comment_id: str,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentResponse:
    """Toggle the caller's like on a comment."""
    try:
        return await comment_service.toggle_like(comment_id, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
