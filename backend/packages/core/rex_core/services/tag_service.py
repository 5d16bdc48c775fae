"""
Tag service.

The owner of an interaction can tag the people they experienced the thing
with. Tagged Rex users accept or decline; accepting gives them their own
interaction in the tagged state. Tagged non-users are only recorded.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.feed.visibility import can_view
from rex_core.schemas import (
    InteractionCreate,
    InteractionState,
    TagAcceptResult,
    TagCreate,
    TagResponse,
    TagStatus,
    UserResponse,
)
from rex_database.models import Tag, Thing, User, UserThingInteraction
from rex_database.models.base import utcnow

from .interaction_service import InteractionService
from .user_service import load_following_ids

logger = get_logger(__name__)


class TagService:
    """Friend tagging service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, tag_id: str) -> Tag:
        tag = await self.session.get(Tag, tag_id)
        if not tag:
            raise ValueError("Tag not found")
        return tag

    async def create_tags(
        self, interaction_id: str, tagger: UserResponse, data: TagCreate
    ) -> list[TagResponse]:
        """
        Tag people on one of the tagger's interactions.

        A user already tagged on the interaction keeps the existing tag.

        Args:
            interaction_id: Interaction to tag people on.
            tagger: Acting user; must own the interaction.
            data: Users and non-users to tag.

        Returns:
            One tag per requested person, in request order.

        Raises:
            ValueError: If the interaction or a tagged user does not exist,
                or the tagger tags themselves.
            PermissionError: If the interaction belongs to someone else.
        """
        interaction = await self.session.get(UserThingInteraction, interaction_id)
        if not interaction:
            raise ValueError("Interaction not found")
        if interaction.user_id != tagger.id:
            raise PermissionError("Not allowed to tag people on this interaction")
        if tagger.id in data.user_ids:
            raise ValueError("Cannot tag yourself")

        existing = await self._tags_by_user(interaction_id)
        users: dict[str, User] = {}
        for user_id in data.user_ids:
            if user_id in existing:
                continue
            user = await self.session.get(User, user_id)
            if not user:
                raise ValueError("User not found")
            users[user_id] = user

        thing = await self.session.get(Thing, interaction.thing_id)
        tags: list[Tag] = []
        for user_id in data.user_ids:
            if user_id in existing:
                tags.append(existing[user_id])
            else:
                user = users[user_id]
                tags.append(self._new_tag(interaction, thing, tagger, user.id, user.name, None))
        for person in data.non_users:
            tags.append(
                self._new_tag(interaction, thing, tagger, None, person.name, person.email)
            )

        await self.session.commit()
        for tag in tags:
            await self.session.refresh(tag)

        logger.info(
            "Tags created",
            extra={
                "interaction_id": interaction_id,
                "tagger_id": tagger.id,
                "users": len(data.user_ids),
                "non_users": len(data.non_users),
            },
        )
        return [TagResponse.model_validate(t) for t in tags]

    async def _tags_by_user(self, interaction_id: str) -> dict[str, Tag]:
        stmt = select(Tag).where(
            Tag.interaction_id == interaction_id, Tag.tagged_user_id.is_not(None)
        )
        result = await self.session.execute(stmt)
        return {t.tagged_user_id: t for t in result.scalars().all()}

    def _new_tag(
        self,
        interaction: UserThingInteraction,
        thing: Thing,
        tagger: UserResponse,
        user_id: str | None,
        name: str,
        email: str | None,
    ) -> Tag:
        tag = Tag(
            interaction_id=interaction.id,
            thing_id=interaction.thing_id,
            thing_title=thing.title,
            tagger_id=tagger.id,
            tagger_name=tagger.name,
            tagged_user_id=user_id,
            tagged_name=name,
            tagged_email=email,
            state=interaction.state,
            rating=interaction.rating,
            status=TagStatus.PENDING.value,
        )
        self.session.add(tag)
        return tag

    async def get_tag(self, tag_id: str, viewer_id: str) -> TagResponse:
        """
        Get a tag as seen by the tagger or the tagged user.

        Raises:
            ValueError: If the tag does not exist.
            PermissionError: If ``viewer_id`` is neither party.
        """
        tag = await self._get_model(tag_id)
        if viewer_id not in (tag.tagger_id, tag.tagged_user_id):
            raise PermissionError("Not allowed to view this tag")
        return TagResponse.model_validate(tag)

    async def list_pending(self, user_id: str) -> list[TagResponse]:
        """Tags waiting for ``user_id`` to answer, newest first."""
        stmt = (
            select(Tag)
            .where(Tag.tagged_user_id == user_id, Tag.status == TagStatus.PENDING.value)
            .order_by(Tag.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [TagResponse.model_validate(t) for t in result.scalars().all()]

    async def list_interaction_tags(self, interaction_id: str, viewer_id: str) -> list[TagResponse]:
        """
        List the people tagged on an interaction.

        Declined tags are left out. Non-user emails are only shown to the
        tagger.

        Raises:
            ValueError: If the interaction does not exist or is not visible.
        """
        interaction = await self.session.get(UserThingInteraction, interaction_id)
        following = await load_following_ids(self.session, viewer_id)
        if not interaction or not can_view(
            interaction.user_id, interaction.visibility, viewer_id, following
        ):
            raise ValueError("Interaction not found")

        stmt = (
            select(Tag)
            .where(
                Tag.interaction_id == interaction_id,
                Tag.status != TagStatus.DECLINED.value,
            )
            .order_by(Tag.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [TagResponse.model_validate(t).redacted_for(viewer_id) for t in result.scalars().all()]

    async def _answerable(self, tag_id: str, user_id: str) -> Tag:
        tag = await self._get_model(tag_id)
        if tag.tagged_user_id != user_id:
            raise PermissionError("Not allowed to answer this tag")
        if tag.status != TagStatus.PENDING.value:
            raise ValueError("Tag already answered")
        return tag

    async def accept_tag(self, tag_id: str, user: UserResponse) -> TagAcceptResult:
        """
        Accept a tag.

        The tagged user gets the tag's state on the thing. A completed
        interaction they already have is left as it is.

        Raises:
            ValueError: If the tag does not exist or was already answered.
            PermissionError: If ``user`` is not the tagged user.
        """
        tag = await self._answerable(tag_id, user.id)
        tag.status = TagStatus.ACCEPTED.value
        tag.responded_at = utcnow()

        interactions = InteractionService(self.session)
        current = await interactions.get_user_interaction(user.id, tag.thing_id)
        if current is not None and current.state == InteractionState.COMPLETED:
            await self.session.commit()
            interaction = current
        else:
            # Commits the tag answer together with the interaction
            interaction, _ = await interactions.save_interaction(
                user, InteractionCreate(thing_id=tag.thing_id, state=InteractionState(tag.state))
            )
        await self.session.refresh(tag)

        logger.info(
            "Tag accepted",
            extra={"tag_id": tag_id, "user_id": user.id, "thing_id": tag.thing_id},
        )
        return TagAcceptResult(tag=TagResponse.model_validate(tag), interaction=interaction)

    async def decline_tag(self, tag_id: str, user_id: str) -> TagResponse:
        """
        Decline a tag.

        Raises:
            ValueError: If the tag does not exist or was already answered.
            PermissionError: If ``user_id`` is not the tagged user.
        """
        tag = await self._answerable(tag_id, user_id)
        tag.status = TagStatus.DECLINED.value
        tag.responded_at = utcnow()
        await self.session.commit()
        await self.session.refresh(tag)
        return TagResponse.model_validate(tag)
