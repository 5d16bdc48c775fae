"""
Thing service.

Things are global: the first user to add a book, movie or place creates
it and everyone else references the same row.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.schemas import Category, ThingCreate, ThingResponse
from rex_database.models import Thing

logger = get_logger(__name__)


class ThingService:
    """Thing management service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_thing(self, data: ThingCreate, created_by: str) -> tuple[ThingResponse, bool]:
        """
        Create a thing, reusing an existing one with the same source id.

        Args:
            data: Thing data.
            created_by: Creating user.

        Returns:
            Tuple of (thing, created).
        """
        if data.source_id:
            stmt = select(Thing).where(
                Thing.source == data.source.value, Thing.source_id == data.source_id
            )
            existing = (await self.session.execute(stmt)).scalar_one_or_none()
            if existing:
                return ThingResponse.model_validate(existing), False

        thing = Thing(
            title=data.title,
            category=data.category.value,
            description=data.description,
            image=data.image,
            item_metadata=data.metadata,
            source=data.source.value,
            source_id=data.source_id,
            created_by=created_by,
        )
        self.session.add(thing)
        await self.session.commit()
        await self.session.refresh(thing)

        logger.info("Thing created", extra={"thing_id": thing.id, "category": thing.category})
        return ThingResponse.model_validate(thing), True

    async def get_thing(self, thing_id: str) -> ThingResponse:
        """
        Get a thing by ID.

        Raises:
            ValueError: If thing not found.
        """
        thing = await self.session.get(Thing, thing_id)
        if not thing:
            raise ValueError("Thing not found")
        return ThingResponse.model_validate(thing)

    async def get_things(self, thing_ids: Iterable[str]) -> dict[str, ThingResponse]:
        """
        Batch-load things.

        Unknown ids are simply absent from the result.
        """
        ids = set(thing_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(Thing).where(Thing.id.in_(ids)))
        return {t.id: ThingResponse.model_validate(t) for t in result.scalars().all()}

    async def search_things(
        self, query: str | None = None, category: Category | None = None, limit: int = 50
    ) -> list[ThingResponse]:
        """Search things by title substring and optional category, newest first."""
        stmt = select(Thing)
        if query and query.strip():
            stmt = stmt.where(Thing.title.ilike(f"%{query.strip()}%"))
        if category is not None:
            stmt = stmt.where(Thing.category == category.value)
        stmt = stmt.order_by(Thing.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return [ThingResponse.model_validate(t) for t in result.scalars().all()]
