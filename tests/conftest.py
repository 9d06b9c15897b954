"""Shared test fixtures for hipchat-gifbot."""

from __future__ import annotations

import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from gifbot.audit.logger import AuditLogger
from gifbot.webhook.models import SearchOutcome
from gifbot.webhook.responder import HipChatBot

SLUG = "/gif"
SENDER_NAME = "Tester Jones"
SENDER_HANDLE = "Tester"
MESSAGE_TEXT = "testing a message"
GIF_LINK = "https://i.imgur.com/AbCdEf1.gif"
IMGUR_LINK_PATTERN = re.compile(r"^https?://(i\.)?imgur\.com/\S+$")


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


# --- Factory functions for test data ---


def make_hook(
    message: str | None = f"{SLUG} {MESSAGE_TEXT}",
    name: str | None = SENDER_NAME,
    event: str = "room_message",
) -> dict[str, Any]:
    """Factory for a HipChat room_message webhook body.

    Passing ``None`` for ``message`` or ``name`` leaves that field out.
    """
    sender: dict[str, Any] = {"id": 1, "mention_name": "TesterJones"}
    if name is not None:
        sender["name"] = name
    msg: dict[str, Any] = {
        "date": "2015-01-20T22:45:06.662545+00:00",
        "from": sender,
        "id": "00a3eb7f-fac5-496a-8d64-a9050c712ca1",
        "mentions": [],
        "type": "message",
    }
    if message is not None:
        msg["message"] = message
    return {
        "event": event,
        "item": {
            "message": msg,
            "room": {"id": 1147567, "name": "The Weather Channel"},
        },
        "oauth_client_id": "ed8bb9f0-02d8-426b-9226-0d50fdcd47ea",
        "webhook_id": 578829,
    }


def make_searcher(outcome: SearchOutcome) -> MagicMock:
    """Image searcher double that answers every search with ``outcome``."""
    searcher = MagicMock()
    searcher.random_from_search = AsyncMock(return_value=outcome)
    return searcher


def make_bot(**kwargs: Any) -> HipChatBot:
    """Factory for HipChatBot with sensible defaults."""
    defaults: dict[str, Any] = {
        "searcher": None,
        "handler": None,
        "audit_logger": None,
    }
    defaults.update(kwargs)
    return HipChatBot(**defaults)
