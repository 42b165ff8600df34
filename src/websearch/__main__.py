"""
===================================
Web search orchestrator - command line
===================================

Usage:
    python -m websearch search "question"                   # single search
    python -m websearch search "question one" "question two" # aggregated search
    python -m websearch summarize https://example.com        # fetch links directly
    python -m websearch check local-bing                     # connectivity check
    python -m websearch providers                            # list providers
"""

import asyncio
import dataclasses
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, NoReturn, TypeVar

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from websearch.config import get_config, get_config_safe
from websearch.dependencies import get_config_store, get_web_search_service
from websearch.exceptions import WebSearchException
from websearch.infrastructure import aiohttp_session_manager
from websearch.intent import extract_intent
from websearch.models import (
    MIN_CONTENT_LIMIT,
    SUMMARIZE_QUESTION,
    ProviderDescriptor,
    SearchResponse,
    WebsearchIntent,
)
from websearch.utils import get_console, setup_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

PREVIEW_CHARS = 300


def _run(coro_factory: Callable[[], Awaitable[T]]) -> T:
    """Run a coroutine inside the shared HTTP session."""

    async def _main() -> T:
        async with aiohttp_session_manager(timeout=get_config().fetch.fetch_timeout):
            return await coro_factory()

    return asyncio.run(_main())


def _apply_overrides(max_results: int | None, content_limit: int | None, no_time: bool) -> None:
    store = get_config_store()
    changes: dict[str, Any] = {}
    if max_results is not None:
        changes["max_results"] = max_results
    if content_limit is not None:
        changes["content_limit"] = content_limit
    if no_time:
        changes["search_with_time"] = False
    if changes:
        store.replace(dataclasses.replace(store.snapshot(), **changes))


def _fail(error: WebSearchException) -> NoReturn:
    get_console().print(f"[search.error]{escape(str(error))}[/search.error]")
    sys.exit(1)


def _print_response(response: SearchResponse, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))
        return

    console = get_console()
    console.print()
    console.rule(f"[search.query]{escape(response.query or '(no query)')}[/search.query]", style="cyan")
    if not response.results:
        console.print("  No results", style="dim")
        return

    for index, result in enumerate(response.results, 1):
        preview = result.content[:PREVIEW_CHARS]
        if len(result.content) > PREVIEW_CHARS:
            preview += " …"
        console.print(
            Panel(
                preview,
                title=f"[search.title]{index}. {escape(result.title)}[/search.title]",
                subtitle=f"[search.url]{escape(result.url)}[/search.url]",
                subtitle_align="left",
            )
        )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Web search orchestrator"""
    config, errors = get_config_safe()
    if config is None:
        for error in errors:
            click.echo(error, err=True)
        ctx.exit(1)

    effective_debug = debug or config.system.debug
    setup_logging(debug=effective_debug, log_dir=config.logging.log_dir, level=config.logging.log_level)

    for warning in config.validate_config():
        logger.warning(warning)


@cli.command()
@click.argument("questions", nargs=-1, required=True)
@click.option("--provider", "provider_id", type=str, default=None, help="Provider id (default: configured default)")
@click.option("--max-results", type=click.IntRange(1, 100), default=None, help="Maximum results per question")
@click.option(
    "--content-limit", type=click.IntRange(MIN_CONTENT_LIMIT), default=None, help="Maximum characters per result"
)
@click.option("--no-time", is_flag=True, help="Do not prefix the query with today's date")
@click.option("--json", "as_json", is_flag=True, help="Print the response as JSON")
def search(
    questions: tuple[str, ...],
    provider_id: str | None,
    max_results: int | None,
    content_limit: int | None,
    no_time: bool,
    as_json: bool,
) -> None:
    """Search one question, or several questions concurrently."""
    _apply_overrides(max_results, content_limit, no_time)
    service = get_web_search_service()

    try:
        descriptor = _resolve_descriptor(provider_id)
        if len(questions) == 1:
            response = _run(lambda: service.search(descriptor, questions[0]))
        else:
            intent = WebsearchIntent(questions=questions)
            response = _run(lambda: service.process_aggregated_search(descriptor, intent))
    except WebSearchException as e:
        _fail(e)

    _print_response(response, as_json)


@cli.command()
@click.argument("links", nargs=-1, required=True)
@click.option(
    "--content-limit", type=click.IntRange(MIN_CONTENT_LIMIT), default=None, help="Maximum characters per result"
)
@click.option("--json", "as_json", is_flag=True, help="Print the response as JSON")
def summarize(links: tuple[str, ...], content_limit: int | None, as_json: bool) -> None:
    """Fetch the given links directly, without searching."""
    _apply_overrides(None, content_limit, False)
    service = get_web_search_service()
    intent = WebsearchIntent(questions=(SUMMARIZE_QUESTION,), links=links)

    try:
        descriptor = service.resolve_default_provider()
    except WebSearchException as e:
        _fail(e)

    response = _run(lambda: service.process_aggregated_search(descriptor, intent))
    _print_response(response, as_json)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--provider", "provider_id", type=str, default=None, help="Provider id (default: configured default)")
@click.option("--json", "as_json", is_flag=True, help="Print the response as JSON")
def intent(source: Any, provider_id: str | None, as_json: bool) -> None:
    """Run the <websearch> block found in SOURCE (file or stdin)."""
    parsed = extract_intent(source.read())
    if parsed is None:
        get_console().print("[yellow]No <websearch> block found[/yellow]")
        sys.exit(1)

    service = get_web_search_service()
    try:
        descriptor = _resolve_descriptor(provider_id)
    except WebSearchException as e:
        _fail(e)

    response = _run(lambda: service.process_aggregated_search(descriptor, parsed))
    _print_response(response, as_json)


@cli.command()
@click.argument("provider_id", required=False)
def check(provider_id: str | None) -> None:
    """Check that a provider answers a test query."""
    service = get_web_search_service()
    try:
        descriptor = _resolve_descriptor(provider_id)
    except WebSearchException as e:
        _fail(e)

    result = _run(lambda: service.check_provider(descriptor))
    console = get_console()
    if result["valid"]:
        console.print(f"[search.ok]✓[/search.ok] {descriptor.display_name} ({descriptor.id}) is working")
    else:
        error = escape(str(result.get("error")))
        console.print(f"[search.fail]✗[/search.fail] {descriptor.display_name} ({descriptor.id}): {error}")
        sys.exit(1)


@cli.command()
def providers() -> None:
    """List configured providers."""
    service = get_web_search_service()
    config = service.configuration

    table = Table(title="Search providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Endpoint")
    table.add_column("Default", justify="center")

    for descriptor in config.providers:
        kind = "local" if descriptor.is_local else "api"
        endpoint = descriptor.url if descriptor.is_local else (descriptor.api_host or "")
        is_default = "●" if descriptor.id == config.default_provider_id else ""
        table.add_row(descriptor.id, descriptor.display_name, kind, endpoint or "-", is_default)

    console = get_console()
    console.print(table)
    status = "[green]enabled[/green]" if service.is_enabled() else "[yellow]not configured[/yellow]"
    console.print(f"Web search: {status}")


def _resolve_descriptor(provider_id: str | None) -> ProviderDescriptor:
    service = get_web_search_service()
    if provider_id is None:
        return service.resolve_default_provider()

    descriptor = service.configuration.find_provider(provider_id)
    if descriptor is None:
        raise click.BadParameter(f"Unknown provider '{provider_id}'", param_hint="--provider")
    return descriptor


if __name__ == "__main__":
    cli()
