"""Data models for the webhook responder."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, Union

from gifbot.models import HipChatResponse


@dataclass(frozen=True)
class ExtractedRequest:
    """Sender and text pulled out of an inbound HipChat hook."""

    sender_handle: str | None
    message_text: str | None

    @property
    def complete(self) -> bool:
        return bool(self.sender_handle) and bool(self.message_text)


@dataclass(frozen=True)
class HookResult:
    """Outcome of handling one hook.

    Both branches carry a reply; ``ok`` tells the caller which one it got.
    """

    response: HipChatResponse
    ok: bool = True

    @property
    def failed(self) -> bool:
        return not self.ok


# --- Search outcomes ---


@dataclass(frozen=True)
class SearchHit:
    link: str


@dataclass(frozen=True)
class EmptyResult:
    query: str  # as sent, still percent-encoded


@dataclass(frozen=True)
class ServiceError:
    status_code: int
    detail: str


@dataclass(frozen=True)
class TransportError:
    """Network failure or 5xx; the cause is logged, never shown to users."""


SearchOutcome = Union[SearchHit, EmptyResult, ServiceError, TransportError]


class ImageSearcher(Protocol):
    async def random_from_search(self, query: str) -> SearchOutcome: ...


GenericHandler = Callable[[ExtractedRequest, Any], HipChatResponse]
