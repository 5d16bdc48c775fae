"""
User service.

Handles profile completion, profile updates and the follow graph.
"""

import random
import re

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core import get_logger
from rex_core.schemas import ProfileCreate, ProfileUpdate, UserProfile, UserResponse
from rex_database.models import User, UserFollow

logger = get_logger(__name__)

_MAX_USERNAME_SUFFIX = 999


async def load_following_ids(session: AsyncSession, user_id: str) -> set[str]:
    """
    Load the ids of users that ``user_id`` follows.

    Args:
        session: Database session.
        user_id: Follower.

    Returns:
        Set of followee ids.
    """
    stmt = select(UserFollow.followee_id).where(UserFollow.follower_id == user_id)
    result = await session.execute(stmt)
    return set(result.scalars().all())


class UserService:
    """User profile and follow graph service."""

    def __init__(self, session: AsyncSession):
        """
        Initialize user service.

        Args:
            session: Database session.
        """
        self.session = session

    async def _get_user_model(self, user_id: str) -> User:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise ValueError("User not found")
        return user

    async def _username_taken(self, username: str, exclude_user_id: str | None = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def generate_username(self, name: str) -> str:
        """
        Derive a free username from a display name.

        Lowercase alphanumerics, at most 15 characters, with a numeric
        suffix on collision.

        Args:
            name: Display name.

        Returns:
            An unused username.
        """
        base = re.sub(r"[^a-z0-9]", "", name.lower())[:15]
        if len(base) < 3:
            base = "user"

        if not await self._username_taken(base):
            return base
        for counter in range(1, _MAX_USERNAME_SUFFIX + 1):
            candidate = f"{base}{counter}"
            if not await self._username_taken(candidate):
                return candidate
        return f"user{random.randint(10000, 99999)}"

    async def create_profile(
        self, user_id: str, data: ProfileCreate, phone_verified: bool = False
    ) -> UserProfile:
        """
        Create the profile for a newly signed-up identity.

        Args:
            user_id: Identity provider uid.
            data: Profile data.
            phone_verified: Phone verification claim from the identity token.

        Returns:
            Created profile.

        Raises:
            ValueError: If the profile already exists or the username is taken.
        """
        existing = await self.session.execute(select(User.id).where(User.id == user_id))
        if existing.first() is not None:
            raise ValueError("Profile already exists")

        if data.username:
            if await self._username_taken(data.username):
                raise ValueError("Username already taken")
            username = data.username
        else:
            username = await self.generate_username(data.name)

        user = User(
            id=user_id,
            name=data.name,
            username=username,
            email=str(data.email) if data.email else None,
            phone_verified=phone_verified,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)

        logger.info("Profile created", extra={"user_id": user_id, "username": username})
        return UserProfile.model_validate(user)

    async def get_user(self, user_id: str) -> UserResponse:
        """
        Get public user info by ID.

        Raises:
            ValueError: If user not found.
        """
        return UserResponse.model_validate(await self._get_user_model(user_id))

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Get a user's own profile including the following list.

        Raises:
            ValueError: If user not found.
        """
        user = await self._get_user_model(user_id)
        profile = UserProfile.model_validate(user)
        profile.following = sorted(await self.get_following_ids(user_id))
        return profile

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """
        Update name and/or username.

        Display names already copied onto interactions and comments are not
        rewritten.

        Raises:
            ValueError: If user not found or the username is taken.
        """
        user = await self._get_user_model(user_id)

        if update.username is not None and update.username != user.username:
            if await self._username_taken(update.username, exclude_user_id=user_id):
                raise ValueError("Username already taken")
            user.username = update.username
        if update.name is not None:
            user.name = update.name.strip()

        await self.session.commit()
        await self.session.refresh(user)
        return await self.get_profile(user_id)

    async def follow(self, follower_id: str, followee_id: str) -> bool:
        """
        Follow another user.

        Returns:
            True if a new edge was created, False if already following.

        Raises:
            ValueError: If following oneself or the target does not exist.
        """
        if follower_id == followee_id:
            raise ValueError("Cannot follow yourself")
        await self._get_user_model(followee_id)

        stmt = select(UserFollow.id).where(
            UserFollow.follower_id == follower_id, UserFollow.followee_id == followee_id
        )
        if (await self.session.execute(stmt)).first() is not None:
            return False

        self.session.add(UserFollow(follower_id=follower_id, followee_id=followee_id))
        await self.session.commit()
        logger.info("User followed", extra={"follower_id": follower_id, "followee_id": followee_id})
        return True

    async def unfollow(self, follower_id: str, followee_id: str) -> bool:
        """
        Stop following a user.

        Returns:
            True if an edge was removed.
        """
        stmt = delete(UserFollow).where(
            UserFollow.follower_id == follower_id, UserFollow.followee_id == followee_id
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return (result.rowcount or 0) > 0

    async def get_following_ids(self, user_id: str) -> set[str]:
        """Ids of users ``user_id`` follows."""
        return await load_following_ids(self.session, user_id)

    async def get_follower_ids(self, user_id: str) -> set[str]:
        """Ids of users following ``user_id``."""
        stmt = select(UserFollow.follower_id).where(UserFollow.followee_id == user_id)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def search_users(self, query: str, limit: int = 20) -> list[UserResponse]:
        """
        Search users by name or username substring (case-insensitive).

        Args:
            query: Search text; a leading @ is ignored.
            limit: Maximum number of results.
        """
        query = query.strip().lstrip("@")
        if not query:
            return []
        pattern = f"%{query.lower()}%"
        stmt = (
            select(User)
            .where(or_(User.name.ilike(pattern), User.username.ilike(pattern)))
            .order_by(User.username)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [UserResponse.model_validate(u) for u in result.scalars().all()]
