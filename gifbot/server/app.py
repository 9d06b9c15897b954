"""FastAPI application exposing the bot as HipChat webhook endpoints."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gifbot.audit.logger import AuditLogger
from gifbot.search.imgur import DEFAULT_TIMEOUT_SECONDS, IMGUR_API_URL, ImgurSearchClient
from gifbot.webhook.models import HookResult
from gifbot.webhook.responder import DEFAULT_SLUG, HipChatBot

logger = logging.getLogger(__name__)


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    client_id = os.environ["IMGUR_CLIENT_ID"]
    api_url = os.environ.get("IMGUR_API_URL", IMGUR_API_URL)
    timeout = float(os.environ.get("IMGUR_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))
    slug = os.environ.get("GIF_SLUG", DEFAULT_SLUG)
    audit_log = os.environ.get("AUDIT_LOG_PATH")

    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    searcher = ImgurSearchClient(client_id, api_url=api_url, timeout=timeout)
    bot = HipChatBot(searcher=searcher, audit_logger=audit_logger)
    return create_app(bot, slug=slug)


def create_app(bot: HipChatBot, slug: str = DEFAULT_SLUG) -> FastAPI:
    """Create the webhook app around an already configured bot."""
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/hook")
    async def generic_hook(request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        return _reply(bot.parse_generic_request(payload))

    @app.post("/gif")
    async def gif_hook(request: Request) -> JSONResponse:
        payload = await _read_payload(request)
        return _reply(await bot.parse_image_search_request(payload, slug))

    return app


async def _read_payload(request: Request) -> Any:
    body = await request.body()
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Hook body is not JSON (%d bytes)", len(body))
        return None


def _reply(result: HookResult) -> JSONResponse:
    # HipChat only renders replies sent with 200, so failures use it too
    return JSONResponse(result.response.to_wire(), status_code=200)
