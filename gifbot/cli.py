"""Click CLI for replaying hooks and running one-off searches."""

from __future__ import annotations

import asyncio
import json
from typing import IO

import click

from gifbot.audit.logger import AuditLogger
from gifbot.search.imgur import DEFAULT_TIMEOUT_SECONDS, IMGUR_API_URL, ImgurSearchClient
from gifbot.webhook.models import HookResult
from gifbot.webhook.responder import DEFAULT_SLUG, HipChatBot


@click.group()
@click.option("--client-id", envvar="IMGUR_CLIENT_ID", default=None, help="Imgur API client ID.")
@click.option("--api-url", envvar="IMGUR_API_URL", default=IMGUR_API_URL, help="Imgur API base URL.")
@click.option(
    "--timeout", envvar="IMGUR_TIMEOUT", default=DEFAULT_TIMEOUT_SECONDS, type=float,
    help="Search timeout in seconds.",
)
@click.option("--audit-log", envvar="AUDIT_LOG_PATH", default=None, help="Audit log file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    client_id: str | None,
    api_url: str,
    timeout: float,
    audit_log: str | None,
) -> None:
    """HipChat GIF bot."""
    ctx.ensure_object(dict)
    searcher = (
        ImgurSearchClient(client_id, api_url=api_url, timeout=timeout)
        if client_id else None
    )
    audit_logger = AuditLogger(audit_log) if audit_log else None
    ctx.obj["bot"] = HipChatBot(searcher=searcher, audit_logger=audit_logger)
    ctx.obj["can_search"] = searcher is not None


@cli.command()
@click.argument("payload_file", type=click.File("r"))
@click.option("--search/--generic", default=True, help="Answer as the GIF bot or the generic bot.")
@click.option("--slug", default=DEFAULT_SLUG, show_default=True, help="Command slug to strip.")
@click.pass_context
def hook(ctx: click.Context, payload_file: IO[str], search: bool, slug: str) -> None:
    """Replay a HipChat webhook JSON file and print the reply."""
    bot: HipChatBot = ctx.obj["bot"]
    try:
        payload = json.load(payload_file)
    except json.JSONDecodeError:
        payload = None

    if search:
        _require_searcher(ctx)
        result = asyncio.run(bot.parse_image_search_request(payload, slug))
    else:
        result = bot.parse_generic_request(payload)
    _emit(ctx, result)


@cli.command()
@click.argument("query")
@click.option("--sender", default=None, help="Name to address the reply to.")
@click.pass_context
def search(ctx: click.Context, query: str, sender: str | None) -> None:
    """Run one image search and print the reply."""
    bot: HipChatBot = ctx.obj["bot"]
    _require_searcher(ctx)
    payload = {"item": {"message": {"from": {"name": sender}}}} if sender else {}
    result = asyncio.run(
        bot.perform_search(query + bot.templates.extension_filter, payload),
    )
    _emit(ctx, result)


def _require_searcher(ctx: click.Context) -> None:
    if not ctx.obj["can_search"]:
        raise click.UsageError("An Imgur client ID is required (--client-id or IMGUR_CLIENT_ID).")


def _emit(ctx: click.Context, result: HookResult) -> None:
    click.echo(json.dumps(result.response.to_wire(), indent=2))
    if result.failed:
        ctx.exit(1)
