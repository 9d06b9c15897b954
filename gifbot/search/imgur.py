"""Imgur gallery search client.

Implements the ``ImageSearcher`` contract used by ``HipChatBot``: one GET
per search, no retry, and every failure returned as a ``SearchOutcome``
instead of raised.
"""

from __future__ import annotations

import logging
import random
from typing import Any

import httpx

from gifbot.webhook.models import (
    EmptyResult,
    SearchHit,
    SearchOutcome,
    ServiceError,
    TransportError,
)

logger = logging.getLogger(__name__)

IMGUR_API_URL = "https://api.imgur.com/3"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ImgurSearchClient:
    """Picks a random image from an Imgur gallery search."""

    def __init__(
        self,
        client_id: str,
        api_url: str = IMGUR_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        rng: random.Random | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._api_url = api_url
        self._timeout = timeout
        self._rng = rng or random.Random()
        self._transport = transport

    async def random_from_search(self, query: str) -> SearchOutcome:
        """Search the gallery for ``query``, which must already be percent-encoded."""
        url = f"{self._api_url.rstrip('/')}/gallery/search?q={query}"
        headers = {"Authorization": f"Client-ID {self._client_id}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(url, headers=headers, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Imgur search request failed: %s", exc)
            return TransportError()

        if resp.status_code >= 500:
            logger.warning("Imgur returned HTTP %d", resp.status_code)
            return TransportError()

        try:
            body = resp.json()
        except ValueError:  # JSONDecodeError or UnicodeDecodeError
            body = None

        if resp.status_code != 200:
            return ServiceError(
                status_code=resp.status_code,
                detail=_error_detail(body, resp.reason_phrase),
            )
        if body is None:
            logger.warning("Imgur returned a non-JSON body for a successful search")
            return TransportError()

        links = _image_links(body)
        if not links:
            return EmptyResult(query=query)
        return SearchHit(link=self._rng.choice(links))


def _image_links(body: Any) -> list[str]:
    """Links of gallery items; albums contribute their first image."""
    items = body.get("data") if isinstance(body, dict) else None
    if not isinstance(items, list):
        return []

    links: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        images = item.get("images") if item.get("is_album") else None
        cover = images[0] if isinstance(images, list) and images else None
        if isinstance(cover, dict) and cover.get("link"):
            links.append(cover["link"])
        elif item.get("link"):
            links.append(item["link"])
    return links


def _error_detail(body: Any, fallback: str) -> str:
    data = body.get("data") if isinstance(body, dict) else None
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        error = error.get("message")
    return error if isinstance(error, str) and error else fallback
