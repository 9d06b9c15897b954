"""HipChat hook extraction helpers.

Hooks arrive as untrusted JSON. Every lookup tolerates missing or oddly
typed fields and reports them as absent.

See https://www.hipchat.com/docs/apiv2/webhooks for the payload shape.
"""

from __future__ import annotations

from typing import Any

from gifbot.webhook.models import ExtractedRequest


class MissingMessageError(ValueError):
    """Raised when a hook that must carry message text does not."""

    def __init__(self) -> None:
        super().__init__("HipChat hook has no message text")


def extract_message(payload: Any) -> dict[str, Any]:
    """Return ``item.message`` from a hook, or an empty dict."""
    if not isinstance(payload, dict):
        return {}
    item = payload.get("item")
    if not isinstance(item, dict):
        return {}
    message = item.get("message")
    return message if isinstance(message, dict) else {}


def extract_sender_handle(payload: Any) -> str | None:
    """First word of the sender's display name, used to address replies."""
    sender = extract_message(payload).get("from")
    if isinstance(sender, dict) and isinstance(sender.get("name"), str):
        return sender["name"].split(" ")[0]
    return None


def extract_message_text(payload: Any) -> str | None:
    text = extract_message(payload).get("message")
    return text if isinstance(text, str) else None


def extract_request(payload: Any) -> ExtractedRequest:
    return ExtractedRequest(
        sender_handle=extract_sender_handle(payload),
        message_text=extract_message_text(payload),
    )


def strip_prefix(text: str, prefix: str | None) -> str:
    """Remove the command slug, keeping what follows its last occurrence.

    ``"/gif cats /gif dogs"`` becomes ``"dogs"``. The match is a plain,
    case-sensitive substring match anywhere in the text.
    """
    if not prefix:
        return text.strip()
    return text.split(prefix)[-1].strip()


def explode(payload: Any, prefix: str | None = None) -> list[str]:
    """Lower-cased words of the message with the slug removed."""
    text = extract_message_text(payload)
    if text is None:
        raise MissingMessageError()
    return strip_prefix(text, prefix).lower().split(" ")
