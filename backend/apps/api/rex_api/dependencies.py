"""
FastAPI dependencies.

Provides dependency injection for database sessions, authentication, the
Redis pool and services.
"""

from typing import Annotated

from arq.connections import ArqRedis
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rex_core.auth import JWTConfig, TokenData, verify_token
from rex_core.config import identity_provider_config
from rex_core.schemas import UserProfile
from rex_core.services import (
    CommentService,
    FeedService,
    InteractionService,
    RecommendationService,
    ShareService,
    TagService,
    ThingService,
    UserService,
)
from rex_database.session import get_session

from .config import settings

# Security scheme for bearer tokens; missing credentials are handled below
security = HTTPBearer(auto_error=False)

# Global Redis connection pool (task queue and feed cache)
_redis_pool: ArqRedis | None = None


def set_redis_pool(pool: ArqRedis | None) -> None:
    """Install (or clear) the global Redis pool."""
    global _redis_pool
    _redis_pool = pool


async def get_redis_pool() -> ArqRedis:
    """
    Get the global Redis connection pool.

    Raises:
        RuntimeError: If Redis pool not initialized.
    """
    if _redis_pool is None:
        raise RuntimeError("Redis pool not initialized")
    return _redis_pool


def get_jwt_config() -> JWTConfig:
    """
    Get JWT configuration.

    Returns:
        JWT configuration instance.
    """
    return JWTConfig(
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        issuer=identity_provider_config.issuer,
        audience=identity_provider_config.audience,
        phone_verified_claim=identity_provider_config.phone_verified_claim,
    )


async def get_optional_token_data(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    jwt_config: Annotated[JWTConfig, Depends(get_jwt_config)],
) -> TokenData | None:
    """Verified token claims, or None when the request is anonymous or the token is bad."""
    if credentials is None:
        return None
    token_data = verify_token(credentials.credentials, jwt_config)
    if not token_data or token_data.type != "access":
        return None
    return token_data


async def get_token_data(
    token_data: Annotated[TokenData | None, Depends(get_optional_token_data)],
) -> TokenData:
    """
    Require a valid bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid.
    """
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data


# Service dependencies
def get_user_service(session: Annotated[AsyncSession, Depends(get_session)]) -> UserService:
    """Get user service instance."""
    return UserService(session)


def get_thing_service(session: Annotated[AsyncSession, Depends(get_session)]) -> ThingService:
    """Get thing service instance."""
    return ThingService(session)


def get_interaction_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> InteractionService:
    """Get interaction service instance."""
    return InteractionService(session)


def get_comment_service(session: Annotated[AsyncSession, Depends(get_session)]) -> CommentService:
    """Get comment service instance."""
    return CommentService(session)


def get_recommendation_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> RecommendationService:
    """Get recommendation service instance."""
    return RecommendationService(session)


def get_feed_service(session: Annotated[AsyncSession, Depends(get_session)]) -> FeedService:
    """Get feed service instance."""
    return FeedService(session, interaction_limit=settings.feed_interaction_limit)


def get_share_service(session: Annotated[AsyncSession, Depends(get_session)]) -> ShareService:
    """Get share service instance."""
    return ShareService(session)


def get_tag_service(session: Annotated[AsyncSession, Depends(get_session)]) -> TagService:
    """Get tag service instance."""
    return TagService(session)


async def get_current_user(
    token_data: Annotated[TokenData, Depends(get_token_data)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserProfile:
    """
    Get the authenticated user's profile.

    Raises:
        HTTPException: 404 if the identity has not completed its profile.
    """
    try:
        return await user_service.get_profile(token_data.sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        ) from None


async def get_optional_current_user(
    token_data: Annotated[TokenData | None, Depends(get_optional_token_data)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserProfile | None:
    """Authenticated user's profile, or None for anonymous or profile-less callers."""
    if token_data is None:
        return None
    try:
        return await user_service.get_profile(token_data.sub)
    except ValueError:
        return None
