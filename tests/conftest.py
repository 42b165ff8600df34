"""Shared fixtures for websearch tests."""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date
from unittest.mock import AsyncMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from websearch.config.storage import ConfigStore
from websearch.models import FetchedResult, ProviderDescriptor, WebSearchConfiguration

BING_RESULT_PAGE = """
<html><body>
<ol id="b_results">
  <li class="b_algo"><h2><a href="https://example.com/one">First result</a></h2></li>
  <li class="b_algo"><h2><a href="https://example.com/two">Second result</a></h2></li>
  <li class="b_algo"><h2><a href="/relative/link">Relative link</a></h2></li>
  <li class="b_algo"><h2><a href="https://example.com/three">Third result</a></h2></li>
  <li class="b_algo"><h2><a href="https://example.com/four">Fourth result</a></h2></li>
</ol>
</body></html>
"""


class FakeRenderer:
    """Render surface that returns canned markup and records session lifecycle."""

    def __init__(self, markup: str = BING_RESULT_PAGE, error: Exception | None = None):
        self.markup = markup
        self.error = error
        self.opened: list[tuple[str, str]] = []
        self.closed: list[str] = []

    async def open_and_capture(self, session_id: str, url: str) -> str:
        self.opened.append((session_id, url))
        if self.error is not None:
            raise self.error
        return self.markup

    async def close_session(self, session_id: str) -> None:
        self.closed.append(session_id)


def make_fetch(
    contents: dict[str, str] | None = None,
    delays: dict[str, float] | None = None,
    failures: dict[str, Exception] | None = None,
) -> Callable:
    """Build a side effect for ``ContentFetcher.fetch`` keyed by URL."""
    contents = contents or {}
    delays = delays or {}
    failures = failures or {}

    async def _fetch(url: str, format: str = "markdown", using_browser: bool = False) -> FetchedResult:
        if url in delays:
            await asyncio.sleep(delays[url])
        if url in failures:
            raise failures[url]
        return FetchedResult(title=f"Title of {url}", url=url, content=contents.get(url, f"Content of {url}"))

    return _fetch


@pytest.fixture
def renderer():
    """Fake page renderer serving a Bing result page."""
    return FakeRenderer()


@pytest.fixture
def fetcher():
    """Content fetcher double; every URL yields 'Content of <url>'."""
    mock = AsyncMock()
    mock.fetch.side_effect = make_fetch()
    return mock


@pytest.fixture
def bing_descriptor():
    return ProviderDescriptor(id="local-bing", name="Bing", url="https://cn.bing.com/search?q=%s&ensearch=1")


@pytest.fixture
def tavily_descriptor():
    return ProviderDescriptor(id="tavily", name="Tavily", api_host="https://api.tavily.com", api_key="tvly-key")


@pytest.fixture
def search_config(bing_descriptor, tavily_descriptor):
    """Configuration with Bing as default and no date prefix."""
    return WebSearchConfiguration(
        default_provider_id="local-bing",
        max_results=5,
        content_limit=None,
        search_with_time=False,
        providers=(bing_descriptor, tavily_descriptor),
    )


@pytest.fixture
def config_store(search_config):
    return ConfigStore(search_config)


@pytest.fixture
def fixed_today():
    return lambda: date(2024, 5, 17)


@pytest.fixture
def make_renderer():
    """Factory for renderers with custom markup or a capture error."""
    return FakeRenderer


@pytest.fixture
def fetch_side_effect():
    """Factory for per-URL ``fetch`` side effects."""
    return make_fetch


@asynccontextmanager
async def serve_pages(pages: dict[str, bytes]) -> AsyncIterator[TestServer]:
    """Local HTTP server answering each path with raw bytes declared as UTF-8 HTML."""

    async def handler(request: web.Request) -> web.Response:
        return web.Response(body=pages[request.path], content_type="text/html", charset="utf-8")

    app = web.Application()
    for path in pages:
        app.router.add_get(path, handler)

    async with TestServer(app, host="127.0.0.1") as server:
        yield server


@pytest.fixture
def page_server():
    """Factory for a local page server, used as ``async with page_server({...}) as server``."""
    return serve_pages
