"""Reply templates. Every error starts with an apology."""

from __future__ import annotations

from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict

ERROR_ROOT = "Sorry, {sender}. "


class MessageTemplates(BaseModel):
    model_config = ConfigDict(frozen=True)

    error_root: str = ERROR_ROOT
    no_results: str = (
        ERROR_ROOT + "I couldn't find anything with the query: \"{query}\". I suck."
    )
    server_error: str = ERROR_ROOT + "Something's borked. Try again later..."
    bad_hook: str = ERROR_ROOT + "Something's borked. HipChat data looks funny."
    greeting: str = "oh hey, {sender}. it's a generic bot."
    fallback_sender: str = "guys"
    # Imgur search syntax restricting results to animated GIFs
    extension_filter: str = " ext:gif"

    def _sender(self, sender: str | None) -> str:
        return sender or self.fallback_sender

    def render_greeting(self, sender: str) -> str:
        return self.greeting.format(sender=sender)

    def render_no_results(self, sender: str | None, query: str) -> str:
        """``query`` is the string sent to the search service."""
        shown = unquote(query).replace(self.extension_filter, "", 1)
        return self.no_results.format(sender=self._sender(sender), query=shown)

    def render_server_error(self, sender: str | None) -> str:
        return self.server_error.format(sender=self._sender(sender))

    def render_bad_hook(self, sender: str | None) -> str:
        return self.bad_hook.format(sender=self._sender(sender))

    def render_custom_error(self, sender: str | None, detail: str) -> str:
        return self.error_root.format(sender=self._sender(sender)) + detail


DEFAULT_TEMPLATES = MessageTemplates()
