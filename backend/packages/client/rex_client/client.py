"""
Rex API client.

Thin async wrapper over ``httpx.AsyncClient`` that returns the shared
pydantic schemas. Non-2xx responses raise ``httpx.HTTPStatusError``.
"""

from typing import Any

import httpx
from pydantic import TypeAdapter

from rex_core import get_logger
from rex_core.schemas import (
    CommentCreate,
    CommentResponse,
    FeedResponse,
    FeedSource,
    InteractionCreate,
    InteractionResponse,
    InteractionUpdate,
    ShareLinkResponse,
    ThingResponse,
    UserProfile,
)

logger = get_logger(__name__)

_comment_list = TypeAdapter(list[CommentResponse])


class RexClient:
    """Authenticated client for one user."""

    def __init__(
        self,
        base_url: str,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``https://rex.example.com``.
            token: Identity provider bearer token.
            transport: Optional transport (used to target an in-process app).
            timeout: Request timeout in seconds.
        """
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "RexClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._http.request(method, path, **kwargs)
        if response.is_error:
            logger.debug(
                "Request failed",
                extra={"method": method, "path": path, "status": response.status_code},
            )
        response.raise_for_status()
        return response

    async def get_me(self) -> UserProfile:
        response = await self._request("GET", "/api/users/me")
        return UserProfile.model_validate(response.json())

    async def get_feed(self) -> FeedResponse:
        response = await self._request("GET", "/api/feed")
        return FeedResponse.model_validate(response.json())

    async def get_feed_source(self) -> FeedSource:
        """Fetch the raw visible interactions and things for client-side aggregation."""
        response = await self._request("GET", "/api/feed/source")
        return FeedSource.model_validate(response.json())

    async def get_thing(self, thing_id: str) -> ThingResponse:
        response = await self._request("GET", f"/api/things/{thing_id}")
        return ThingResponse.model_validate(response.json())

    async def create_interaction(self, data: InteractionCreate) -> InteractionResponse:
        """Save or complete a thing; only explicitly set fields are sent."""
        response = await self._request(
            "POST", "/api/interactions", json=data.model_dump(mode="json", exclude_unset=True)
        )
        return InteractionResponse.model_validate(response.json())

    async def update_interaction(
        self, interaction_id: str, data: InteractionUpdate
    ) -> InteractionResponse:
        response = await self._request(
            "PATCH",
            f"/api/interactions/{interaction_id}",
            json=data.model_dump(mode="json", exclude_unset=True),
        )
        return InteractionResponse.model_validate(response.json())

    async def delete_interaction(self, interaction_id: str) -> None:
        await self._request(
            "DELETE", f"/api/interactions/{interaction_id}", params={"confirm": "true"}
        )

    async def like_interaction(self, interaction_id: str) -> InteractionResponse:
        response = await self._request("POST", f"/api/interactions/{interaction_id}/like")
        return InteractionResponse.model_validate(response.json())

    async def create_comment(self, thing_id: str, data: CommentCreate) -> CommentResponse:
        response = await self._request(
            "POST",
            f"/api/things/{thing_id}/comments",
            json=data.model_dump(mode="json", exclude_unset=True),
        )
        return CommentResponse.model_validate(response.json())

    async def list_comments(self, thing_id: str) -> list[CommentResponse]:
        response = await self._request("GET", f"/api/things/{thing_id}/comments")
        return _comment_list.validate_python(response.json())

    async def share_link(self, thing_id: str, to_name: str | None = None) -> ShareLinkResponse:
        params = {"to_name": to_name} if to_name else None
        response = await self._request("GET", f"/api/things/{thing_id}/share-link", params=params)
        return ShareLinkResponse.model_validate(response.json())
