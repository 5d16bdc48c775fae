"""
Comment service.

Comments hang off a thing and optionally reply to one interaction's take.
A viewer sees only comments written by themselves or by people they follow.
"""

from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.mentions import extract_mentions
from rex_core.schemas import CommentCreate, CommentResponse, UserResponse
from rex_database.models import Comment, Thing, UserThingInteraction

from .user_service import load_following_ids

logger = get_logger(__name__)


class CommentService:
    """Comment management service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, comment_id: str) -> Comment:
        comment = await self.session.get(Comment, comment_id)
        if not comment:
            raise ValueError("Comment not found")
        return comment

    async def list_comments(
        self, thing_id: str, viewer_id: str, following: Collection[str] | None = None
    ) -> list[CommentResponse]:
        """
        List a thing's comments visible to ``viewer_id``, oldest first.

        Args:
            thing_id: Thing.
            viewer_id: Requesting user.
            following: Viewer's following set; loaded when omitted.
        """
        if following is None:
            following = await load_following_ids(self.session, viewer_id)
        authors = {viewer_id, *following}

        stmt = (
            select(Comment)
            .where(Comment.thing_id == thing_id, Comment.author_id.in_(authors))
            .order_by(Comment.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [CommentResponse.model_validate(c) for c in result.scalars().all()]

    async def create_comment(
        self, thing_id: str, author: UserResponse, data: CommentCreate
    ) -> CommentResponse:
        """
        Create a comment.

        Mentions are extracted into ``tagged_users``; a reply to a take bumps
        that interaction's comment count.

        Raises:
            ValueError: If the thing, target interaction or parent comment is
                missing or belongs to another thing.
        """
        if not await self.session.get(Thing, thing_id):
            raise ValueError("Thing not found")

        interaction = None
        if data.interaction_id:
            interaction = await self.session.get(UserThingInteraction, data.interaction_id)
            if not interaction or interaction.thing_id != thing_id:
                raise ValueError("Interaction not found")

        if data.parent_comment_id:
            parent = await self.session.get(Comment, data.parent_comment_id)
            if not parent or parent.thing_id != thing_id:
                raise ValueError("Parent comment not found")

        comment = Comment(
            thing_id=thing_id,
            interaction_id=data.interaction_id,
            parent_comment_id=data.parent_comment_id,
            author_id=author.id,
            author_name=author.name,
            content=data.content,
            liked_by=[],
            tagged_users=extract_mentions(data.content),
            voice_note_url=data.voice_note_url,
            voice_note_duration=data.voice_note_duration,
        )
        self.session.add(comment)
        if interaction is not None:
            interaction.comment_count = (interaction.comment_count or 0) + 1

        await self.session.commit()
        await self.session.refresh(comment)

        logger.info(
            "Comment created",
            extra={"comment_id": comment.id, "thing_id": thing_id, "author_id": author.id},
        )
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, comment_id: str, user_id: str) -> CommentResponse:
        """
        Delete a comment (author only).

        Raises:
            ValueError: If the comment does not exist.
            PermissionError: If ``user_id`` is not the author.
        """
        comment = await self._get_model(comment_id)
        if comment.author_id != user_id:
            raise PermissionError("Not allowed to delete this comment")

        deleted = CommentResponse.model_validate(comment)
        if comment.interaction_id:
            interaction = await self.session.get(UserThingInteraction, comment.interaction_id)
            if interaction is not None:
                interaction.comment_count = max((interaction.comment_count or 0) - 1, 0)

        await self.session.delete(comment)
        await self.session.commit()
        return deleted

    async def toggle_like(self, comment_id: str, user_id: str) -> CommentResponse:
        """
        Like or unlike a comment.

        Raises:
            ValueError: If the comment does not exist.
        """
        comment = await self._get_model(comment_id)
        liked_by = list(comment.liked_by or [])
        if user_id in liked_by:
            liked_by.remove(user_id)
        else:
            liked_by.append(user_id)
        comment.liked_by = liked_by

        await self.session.commit()
        await self.session.refresh(comment)
        return CommentResponse.model_validate(comment)
