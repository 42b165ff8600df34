"""Infrastructure: HTTP session, page rendering surface and content fetching."""

from websearch.infrastructure.fetcher import ContentFetcher
from websearch.infrastructure.http_client import (
    aiohttp_session_manager,
    current_aiohttp_session,
    get_aiohttp_session,
)
from websearch.infrastructure.renderer import HttpPageRenderer, PageRenderer, render_session

__all__ = [
    "ContentFetcher",
    "HttpPageRenderer",
    "PageRenderer",
    "render_session",
    "aiohttp_session_manager",
    "current_aiohttp_session",
    "get_aiohttp_session",
]
