"""HipChat webhook responder.

Turns an inbound HipChat hook into a reply. Every path, including missing
hook data and search failures, ends in a ``HookResult`` carrying a
well-formed ``HipChatResponse``; nothing is raised to the caller.

Pipeline for image search hooks:
1. Extract sender and message text
2. Strip the slug and add the extension filter
3. One call to the image searcher
4. Map the outcome to a reply (and an audit event)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gifbot.models import AuditEvent, AuditEventType, Color, HipChatResponse, MessageFormat
from gifbot.webhook.extractor import extract_request, extract_sender_handle, strip_prefix
from gifbot.webhook.messages import DEFAULT_TEMPLATES, MessageTemplates
from gifbot.webhook.models import (
    EmptyResult,
    ExtractedRequest,
    GenericHandler,
    HookResult,
    ImageSearcher,
    SearchHit,
    SearchOutcome,
    ServiceError,
    TransportError,
)

if TYPE_CHECKING:
    from gifbot.audit.logger import AuditLogger

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "/gif"

# encodeURIComponent leaves these unescaped; Imgur sees the same query either way
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_response(
    message: str,
    color: str | None = None,
    notify: bool = False,
    message_format: str | None = None,
) -> HipChatResponse:
    """Build a HipChat reply; color and format fall back to green and text."""
    return HipChatResponse(
        color=color or Color.GREEN.value,
        message=message,
        message_format=message_format or MessageFormat.TEXT.value,
        notify=bool(notify),
    )


def greeting_handler(
    templates: MessageTemplates = DEFAULT_TEMPLATES,
) -> GenericHandler:
    """Default success branch for generic hooks: say hello to the sender."""

    def _handle(request: ExtractedRequest, payload: Any) -> HipChatResponse:
        return build_response(templates.render_greeting(request.sender_handle or ""))

    return _handle


class HipChatBot:
    """Parses HipChat hooks and answers them.

    The success branch of generic hooks is supplied by ``handler``; the
    validation and bad-hook path is shared.
    """

    build_response = staticmethod(build_response)

    def __init__(
        self,
        searcher: ImageSearcher | None = None,
        handler: GenericHandler | None = None,
        templates: MessageTemplates = DEFAULT_TEMPLATES,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._searcher = searcher
        self._templates = templates
        self._handler = handler or greeting_handler(templates)
        self._audit = audit_logger

    @property
    def templates(self) -> MessageTemplates:
        return self._templates

    # --- messages ---

    def no_results_message(self, sender: str | None, query: str) -> str:
        return self._templates.render_no_results(sender, query)

    def bad_hook_message(self, sender: str | None = None) -> str:
        return self._templates.render_bad_hook(sender)

    def server_error_message(self, sender: str | None) -> str:
        return self._templates.render_server_error(sender)

    def custom_error_message(self, sender: str | None, detail: str) -> str:
        return self._templates.render_custom_error(sender, detail)

    # --- hook parsing ---

    def parse_generic_request(self, payload: Any) -> HookResult:
        request = extract_request(payload)
        if not request.complete:
            return self._bad_hook(request)

        response = self._handler(request, payload)
        self._record(
            AuditEventType.GENERIC_REPLY, request.sender_handle,
            action="generic", result="success",
        )
        return HookResult(response=response)

    async def parse_image_search_request(
        self, payload: Any, prefix: str | None = DEFAULT_SLUG,
    ) -> HookResult:
        """Answer a hook like ``/gif cats`` with a random matching image."""
        request = extract_request(payload)
        if not request.complete:
            return self._bad_hook(request)

        query = strip_prefix(request.message_text or "", prefix)
        query += self._templates.extension_filter
        return await self.perform_search(query, payload)

    async def perform_search(self, query: str, payload: Any) -> HookResult:
        """Search once for ``query`` and reply with the link or an apology."""
        if self._searcher is None:
            raise RuntimeError("HipChatBot was created without an image searcher")

        sender = extract_sender_handle(payload)
        encoded = quote(query, safe=_URI_COMPONENT_SAFE)
        outcome = await self._searcher.random_from_search(encoded)
        return self._reply_for(outcome, sender, encoded)

    # --- internals ---

    def _reply_for(
        self, outcome: SearchOutcome, sender: str | None, query: str,
    ) -> HookResult:
        details: dict[str, object] = {"query": query}

        if isinstance(outcome, SearchHit):
            self._record(
                AuditEventType.IMAGE_FOUND, sender,
                action="search", result="success", details={**details, "link": outcome.link},
            )
            return HookResult(response=build_response(outcome.link))

        if isinstance(outcome, EmptyResult):
            event_type = AuditEventType.IMAGE_NOT_FOUND
            message = self.no_results_message(sender, outcome.query)
        elif isinstance(outcome, ServiceError):
            event_type = AuditEventType.SEARCH_ERROR
            details["status_code"] = outcome.status_code
            message = self.custom_error_message(sender, outcome.detail)
        elif isinstance(outcome, TransportError):
            event_type = AuditEventType.SEARCH_UNAVAILABLE
            message = self.server_error_message(sender)
        else:
            raise TypeError(f"Unknown search outcome: {outcome!r}")

        logger.info("Search for %r failed: %s", query, event_type.value)
        self._record(event_type, sender, action="search", result="failure", details=details)
        return HookResult(response=build_response(message, Color.RED.value), ok=False)

    def _bad_hook(self, request: ExtractedRequest) -> HookResult:
        logger.debug("Malformed HipChat hook: %r", request)
        self._record(
            AuditEventType.BAD_HOOK, request.sender_handle,
            action="parse", result="failure",
        )
        return HookResult(
            response=build_response(
                self.bad_hook_message(request.sender_handle), Color.RED.value,
            ),
            ok=False,
        )

    def _record(
        self,
        event_type: AuditEventType,
        sender: str | None,
        action: str,
        result: str,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=event_type,
                sender=sender,
                action=action,
                result=result,
                details=details,
            ))
