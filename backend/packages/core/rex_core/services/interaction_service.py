"""
Interaction service.

A user holds at most one canonical interaction per thing. The schema does
not enforce this, so writes query first and then decide between create and
update; reads tolerate duplicates by preferring the most recent one.
"""

from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.feed.visibility import can_view, filter_visible
from rex_core.schemas import (
    InteractionCreate,
    InteractionResponse,
    InteractionState,
    InteractionUpdate,
    UserResponse,
)
from rex_database.models import Recommendation, Thing, User, UserThingInteraction
from rex_database.models.base import utcnow

from .user_service import load_following_ids

logger = get_logger(__name__)

# Columns that may not be set to NULL through a partial update
_NON_NULLABLE = {"state", "visibility", "photos"}


class InteractionService:
    """Interaction (save / complete / take) service."""

    def __init__(self, session: AsyncSession):
        """
        Initialize interaction service.

        Args:
            session: Database session.
        """
        self.session = session

    async def _latest(self, user_id: str, thing_id: str) -> UserThingInteraction | None:
        stmt = (
            select(UserThingInteraction)
            .where(
                UserThingInteraction.user_id == user_id,
                UserThingInteraction.thing_id == thing_id,
            )
            .order_by(UserThingInteraction.date.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_model(self, interaction_id: str) -> UserThingInteraction:
        interaction = await self.session.get(UserThingInteraction, interaction_id)
        if not interaction:
            raise ValueError("Interaction not found")
        return interaction

    async def get_interaction(self, interaction_id: str) -> InteractionResponse:
        """
        Get an interaction by ID, unfiltered.

        Raises:
            ValueError: If the interaction does not exist.
        """
        return InteractionResponse.model_validate(await self._get_model(interaction_id))

    async def get_user_interaction(self, user_id: str, thing_id: str) -> InteractionResponse | None:
        """
        Get a user's interaction with a thing.

        Args:
            user_id: Owner.
            thing_id: Thing.

        Returns:
            The most recent interaction, or None.
        """
        interaction = await self._latest(user_id, thing_id)
        return InteractionResponse.model_validate(interaction) if interaction else None

    async def list_user_interactions(
        self,
        owner_id: str,
        viewer_id: str,
        state: InteractionState | None = None,
    ) -> list[InteractionResponse]:
        """
        List one user's interactions as seen by ``viewer_id``.

        Args:
            owner_id: Whose interactions to list.
            viewer_id: Requesting user.
            state: Optional state filter.

        Returns:
            Visible interactions, newest state change first.
        """
        stmt = select(UserThingInteraction).where(UserThingInteraction.user_id == owner_id)
        if state is not None:
            stmt = stmt.where(UserThingInteraction.state == state.value)
        stmt = stmt.order_by(UserThingInteraction.date.desc())

        result = await self.session.execute(stmt)
        interactions = [InteractionResponse.model_validate(i) for i in result.scalars().all()]
        if owner_id == viewer_id:
            return interactions

        following = await load_following_ids(self.session, viewer_id)
        return filter_visible(interactions, viewer_id, following)

    async def save_interaction(
        self, user: UserResponse, data: InteractionCreate
    ) -> tuple[InteractionResponse, bool]:
        """
        Save or complete a thing for ``user``.

        Updates the existing interaction when there is one; only fields
        present in the request are applied. A state change bumps ``date``.
        A newly created interaction credited to another user also records a
        recommendation edge.

        Args:
            user: Acting user.
            data: Interaction data.

        Returns:
            Tuple of (interaction, created).

        Raises:
            ValueError: If the thing or the credited recommender does not exist.
        """
        if not await self.session.get(Thing, data.thing_id):
            raise ValueError("Thing not found")

        existing = await self._latest(user.id, data.thing_id)
        if existing:
            fields = data.model_dump(
                include=data.model_fields_set - {"thing_id", "recommended_by_user_id"},
                mode="json",
            )
            self._apply(existing, fields)
            await self.session.commit()
            await self.session.refresh(existing)
            return InteractionResponse.model_validate(existing), False

        recommender_id = data.recommended_by_user_id
        if recommender_id == user.id:
            recommender_id = None
        if recommender_id and not await self.session.get(User, recommender_id):
            raise ValueError("Recommender not found")

        interaction = UserThingInteraction(
            user_id=user.id,
            user_name=user.name,
            thing_id=data.thing_id,
            state=data.state.value,
            visibility=data.visibility.value,
            rating=data.rating,
            content=data.content,
            photos=list(data.photos),
            notes=data.notes,
            date=utcnow(),
            liked_by=[],
            comment_count=0,
        )
        self.session.add(interaction)
        if recommender_id:
            self.session.add(
                Recommendation(
                    from_user_id=recommender_id,
                    to_user_id=user.id,
                    thing_id=data.thing_id,
                    date=utcnow(),
                )
            )
        await self.session.commit()
        await self.session.refresh(interaction)

        logger.info(
            "Interaction created",
            extra={"user_id": user.id, "thing_id": data.thing_id, "state": interaction.state},
        )
        return InteractionResponse.model_validate(interaction), True

    def _apply(self, interaction: UserThingInteraction, fields: dict) -> None:
        for name, value in fields.items():
            if value is None and name in _NON_NULLABLE:
                continue
            if name == "state" and value != interaction.state:
                interaction.date = utcnow()
            if name == "photos":
                value = list(value)
            setattr(interaction, name, value)

    async def update_interaction(
        self, interaction_id: str, user_id: str, update: InteractionUpdate
    ) -> InteractionResponse:
        """
        Partially update an interaction.

        Raises:
            ValueError: If the interaction does not exist.
            PermissionError: If ``user_id`` does not own it.
        """
        interaction = await self._get_model(interaction_id)
        if interaction.user_id != user_id:
            raise PermissionError("Not allowed to modify this interaction")

        self._apply(interaction, update.model_dump(exclude_unset=True, mode="json"))
        await self.session.commit()
        await self.session.refresh(interaction)
        return InteractionResponse.model_validate(interaction)

    async def delete_interaction(self, interaction_id: str, user_id: str) -> InteractionResponse:
        """
        Delete an interaction (unsave / remove).

        Returns:
            The deleted interaction.

        Raises:
            ValueError: If the interaction does not exist.
            PermissionError: If ``user_id`` does not own it.
        """
        interaction = await self._get_model(interaction_id)
        if interaction.user_id != user_id:
            raise PermissionError("Not allowed to delete this interaction")

        deleted = InteractionResponse.model_validate(interaction)
        await self.session.delete(interaction)
        await self.session.commit()

        logger.info(
            "Interaction deleted",
            extra={"user_id": user_id, "interaction_id": interaction_id, "thing_id": deleted.thing_id},
        )
        return deleted

    async def toggle_like(self, interaction_id: str, user_id: str) -> InteractionResponse:
        """
        Like or unlike a visible interaction.

        Raises:
            ValueError: If the interaction does not exist or is not visible.
        """
        interaction = await self._get_model(interaction_id)
        following = await load_following_ids(self.session, user_id)
        if not can_view(interaction.user_id, interaction.visibility, user_id, following):
            raise ValueError("Interaction not found")

        liked_by = list(interaction.liked_by or [])
        if user_id in liked_by:
            liked_by.remove(user_id)
        else:
            liked_by.append(user_id)
        # JSON columns only track reassignment
        interaction.liked_by = liked_by

        await self.session.commit()
        await self.session.refresh(interaction)
        return InteractionResponse.model_validate(interaction).redacted_for(user_id)

    async def list_thing_interactions(
        self, thing_id: str, viewer_id: str, following: Collection[str] | None = None
    ) -> list[InteractionResponse]:
        """
        List the interactions on a thing visible to ``viewer_id``.

        Args:
            thing_id: Thing.
            viewer_id: Requesting user.
            following: Viewer's following set; loaded when omitted.
        """
        if following is None:
            following = await load_following_ids(self.session, viewer_id)

        stmt = (
            select(UserThingInteraction)
            .where(UserThingInteraction.thing_id == thing_id)
            .order_by(UserThingInteraction.date.desc())
        )
        result = await self.session.execute(stmt)
        interactions = [InteractionResponse.model_validate(i) for i in result.scalars().all()]
        return filter_visible(interactions, viewer_id, following)
