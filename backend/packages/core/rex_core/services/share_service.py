"""
Share service.

Handles the receiving end of a ``/share/{thing_id}?from=<user>`` link.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.schemas import InteractionState, ShareAcceptResult, UserResponse, Visibility
from rex_database.models import Recommendation, Thing, User, UserFollow, UserThingInteraction
from rex_database.models.base import utcnow

from .interaction_service import InteractionService
from .user_service import load_following_ids

logger = get_logger(__name__)


class ShareService:
    """Share link acceptance service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def accept_share(
        self, viewer: UserResponse, thing_id: str, sender_id: str
    ) -> ShareAcceptResult:
        """
        Accept a shared thing on behalf of ``viewer``.

        The viewer starts following the sender. If the viewer has no
        interaction on the thing yet, it is added to their bucket list and a
        recommendation edge from the sender is recorded. Opening the same
        link again changes nothing.

        Args:
            viewer: Authenticated user opening the link.
            thing_id: Shared thing.
            sender_id: User who shared the link.

        Returns:
            What was done, plus the thing id the client should open.

        Raises:
            ValueError: If the sender or the thing does not exist.
        """
        sender = await self.session.get(User, sender_id)
        if not sender:
            raise ValueError("Sender not found")
        thing = await self.session.get(Thing, thing_id)
        if not thing:
            raise ValueError("Thing not found")

        followed = False
        if sender_id != viewer.id:
            following = await load_following_ids(self.session, viewer.id)
            if sender_id not in following:
                self.session.add(UserFollow(follower_id=viewer.id, followee_id=sender_id))
                followed = True

        saved = False
        existing = await InteractionService(self.session).get_user_interaction(viewer.id, thing_id)
        if existing is None:
            now = utcnow()
            self.session.add(
                UserThingInteraction(
                    user_id=viewer.id,
                    user_name=viewer.name,
                    thing_id=thing_id,
                    state=InteractionState.BUCKET_LIST.value,
                    visibility=Visibility.FRIENDS.value,
                    photos=[],
                    date=now,
                    liked_by=[],
                    comment_count=0,
                )
            )
            if sender_id != viewer.id:
                self.session.add(
                    Recommendation(
                        from_user_id=sender_id,
                        to_user_id=viewer.id,
                        thing_id=thing_id,
                        date=now,
                        message=f"Shared {thing.title} via SMS",
                    )
                )
            saved = True

        await self.session.commit()
        logger.info(
            "Share accepted",
            extra={
                "viewer_id": viewer.id,
                "sender_id": sender_id,
                "thing_id": thing_id,
                "saved": saved,
                "followed_sender": followed,
            },
        )
        return ShareAcceptResult(thing_id=thing_id, saved=saved, followed_sender=followed)
