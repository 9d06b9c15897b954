"""Shared Pydantic data models for hipchat-gifbot."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Enums ---


class Color(str, Enum):
    GREEN = "green"
    RED = "red"


class MessageFormat(str, Enum):
    TEXT = "text"


class AuditEventType(str, Enum):
    BAD_HOOK = "bad_hook"
    GENERIC_REPLY = "generic_reply"
    IMAGE_FOUND = "image_found"
    IMAGE_NOT_FOUND = "image_not_found"
    SEARCH_ERROR = "search_error"
    SEARCH_UNAVAILABLE = "search_unavailable"


# --- HipChat reply ---


class HipChatResponse(BaseModel):
    """Room notification body HipChat accepts as a webhook reply.

    Color and format are plain strings so that any value HipChat adds later
    passes through; the enums above only name the common ones.
    """

    model_config = ConfigDict(frozen=True)

    color: str = Color.GREEN.value
    message: str
    message_format: str = MessageFormat.TEXT.value
    notify: bool = False

    @field_validator("notify", mode="before")
    @classmethod
    def _coerce_notify(cls, value: object) -> bool:
        return bool(value)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json")


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    sender: str | None = None
    action: str
    result: str  # "success" | "failure"
    details: dict[str, object] | None = None
