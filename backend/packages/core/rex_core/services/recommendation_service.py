"""
Recommendation service.

Recommendation edges record who caused a user to save or complete a thing.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core.schemas import RecommendationResponse, UserResponse
from rex_database.models import Recommendation, User
from rex_database.models.base import utcnow


class RecommendationService:
    """Recommendation edge service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_recommendation(
        self, from_user_id: str, to_user_id: str, thing_id: str, message: str | None = None
    ) -> RecommendationResponse:
        """
        Record that ``from_user_id`` recommended ``thing_id`` to ``to_user_id``.

        Raises:
            ValueError: If either user is missing or both are the same user.
        """
        if from_user_id == to_user_id:
            raise ValueError("Cannot recommend to yourself")
        for user_id in (from_user_id, to_user_id):
            if not await self.session.get(User, user_id):
                raise ValueError("User not found")

        recommendation = Recommendation(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            thing_id=thing_id,
            date=utcnow(),
            message=message,
        )
        self.session.add(recommendation)
        await self.session.commit()
        await self.session.refresh(recommendation)
        return RecommendationResponse.model_validate(recommendation)

    async def list_received(self, user_id: str) -> list[RecommendationResponse]:
        """Recommendations made to ``user_id``, newest first."""
        stmt = (
            select(Recommendation)
            .where(Recommendation.to_user_id == user_id)
            .order_by(Recommendation.date.desc())
        )
        result = await self.session.execute(stmt)
        return [RecommendationResponse.model_validate(r) for r in result.scalars().all()]

    async def list_sent(self, user_id: str) -> list[RecommendationResponse]:
        """Recommendations made by ``user_id``, newest first."""
        stmt = (
            select(Recommendation)
            .where(Recommendation.from_user_id == user_id)
            .order_by(Recommendation.date.desc())
        )
        result = await self.session.execute(stmt)
        return [RecommendationResponse.model_validate(r) for r in result.scalars().all()]

    async def get_recommenders(self, to_user_id: str, thing_id: str) -> list[UserResponse]:
        """Users who recommended ``thing_id`` to ``to_user_id`` ("recommended by")."""
        stmt = (
            select(User)
            .join(Recommendation, Recommendation.from_user_id == User.id)
            .where(Recommendation.to_user_id == to_user_id, Recommendation.thing_id == thing_id)
            .order_by(Recommendation.date.asc())
        )
        result = await self.session.execute(stmt)
        return [UserResponse.model_validate(u) for u in result.scalars().unique().all()]
