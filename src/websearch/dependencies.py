"""
Dependency injection container - Centralized service management.

Services are created by cached factory functions so the whole process shares
one configuration store, one render surface and one content fetcher.
"""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

from websearch.config import ConfigStore, get_config

if TYPE_CHECKING:
    from websearch.infrastructure import ContentFetcher, HttpPageRenderer
    from websearch.search import WebSearchService


@cache
def get_config_store() -> ConfigStore:
    """
    Get the process-wide configuration store (singleton).

    Returns:
        ConfigStore seeded from environment configuration
    """
    return ConfigStore(get_config().to_configuration())


@cache
def get_page_renderer() -> HttpPageRenderer:
    """Get the page render surface (singleton)."""
    from websearch.infrastructure import HttpPageRenderer

    return HttpPageRenderer(timeout=get_config().fetch.fetch_timeout)


@cache
def get_content_fetcher() -> ContentFetcher:
    """Get the content fetcher (singleton)."""
    from websearch.infrastructure import ContentFetcher

    return ContentFetcher(renderer=get_page_renderer(), timeout=get_config().fetch.fetch_timeout)


@cache
def get_web_search_service() -> WebSearchService:
    """
    Get web search service instance (singleton).

    Returns:
        WebSearchService wired to the shared store, renderer and fetcher
    """
    from websearch.search import WebSearchService

    return WebSearchService(
        store=get_config_store(),
        renderer=get_page_renderer(),
        fetcher=get_content_fetcher(),
    )
