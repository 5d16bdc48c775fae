"""
Share link router.

``/api/share/{thing_id}?from=<user_id>`` is the deep link people send each
other. Anonymous visitors are sent to sign-up with a return URL; signed-in
users get the thing saved and are sent to the app with it open.
"""

from typing import Annotated
from urllib.parse import quote, urlencode

from arq.connections import ArqRedis
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from rex_core.schemas import UserProfile
from rex_core.services import ShareService

from ..config import settings
from ..dependencies import get_optional_current_user, get_redis_pool, get_share_service
from ..feed_cache import refresh_after_write

router = APIRouter()


@router.get("/{thing_id}")
async def open_share_link(
    thing_id: str,
    request: Request,
    current_user: Annotated[UserProfile | None, Depends(get_optional_current_user)],
    share_service: Annotated[ShareService, Depends(get_share_service)],
    redis: Annotated[ArqRedis, Depends(get_redis_pool)],
    sender_id: Annotated[str | None, Query(alias="from")] = None,
) -> RedirectResponse:
    """
    Open a share link.

    Raises:
        HTTPException: 400 without a sender, 404 if sender or thing not found.
    """
    base_url = settings.app_base_url.rstrip("/")
    if current_user is None:
        return_url = quote(str(request.url), safe="")
        return RedirectResponse(
            f"{base_url}/?signup=true&returnUrl={return_url}",
            status_code=status.HTTP_302_FOUND,
        )

    if not sender_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing sender")

    try:
        result = await share_service.accept_share(current_user, thing_id, sender_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None

    if result.saved or result.followed_sender:
        await refresh_after_write(redis, current_user.id)

    return RedirectResponse(
        f"{base_url}/?{urlencode({'open': result.thing_id})}",
        status_code=status.HTTP_302_FOUND,
    )
