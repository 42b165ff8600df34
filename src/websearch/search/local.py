"""
Scrape-based search providers.

A local provider renders the backend's own result page, extracts the result
links from it and fetches each linked page itself. No credential is needed.
"""

import logging
from typing import ClassVar

from websearch.exceptions import InvalidInputError
from websearch.infrastructure.fetcher import ContentFetcher
from websearch.infrastructure.renderer import HttpPageRenderer, PageRenderer, render_session
from websearch.models import ProviderDescriptor, SearchResponse, WebSearchConfiguration
from websearch.query import build_search_url, filter_http_items
from websearch.search.base import BaseSearchProvider
from websearch.search.extractors import BaseExtractor, get_extractor

logger = logging.getLogger(__name__)


class LocalSearchProvider(BaseSearchProvider):
    """
    Base class for result-page scraping providers.

    Pipeline:
    1. Substitute the cleaned, encoded query into the URL template
    2. Capture the rendered result page in a transient render session
    3. Extract candidates, keep http(s) links, cap to ``max_results``
    4. Fetch every candidate's content concurrently
    """

    extractor_kind: ClassVar[str] = ""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        name: str,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
    ):
        super().__init__(descriptor, name, fetcher)
        self._renderer = renderer or HttpPageRenderer()

    @property
    def extractor(self) -> BaseExtractor:
        return get_extractor(self.extractor_kind)

    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        template = self._descriptor.url
        if not template:
            raise InvalidInputError("Provider URL is required")

        url = build_search_url(template, query)
        logger.debug(f"[{self._name}] result page: {url}")

        async with render_session(self._renderer, url) as markup:
            candidates = self.extractor.extract(markup)
            items = filter_http_items(candidates, config.max_results)

        logger.debug(f"[{self._name}] {len(candidates)} candidates, fetching {len(items)}")
        results = await self._fetch_contents(items)
        return SearchResponse(query=query, results=tuple(results))


class LocalGoogleProvider(LocalSearchProvider):
    """Google result page scraping."""

    extractor_kind = "google"

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
    ):
        super().__init__(descriptor, "LocalGoogle", renderer, fetcher)


class LocalBingProvider(LocalSearchProvider):
    """Bing result page scraping."""

    extractor_kind = "bing"

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
    ):
        super().__init__(descriptor, "LocalBing", renderer, fetcher)


class LocalBaiduProvider(LocalSearchProvider):
    """Baidu result page scraping."""

    extractor_kind = "baidu"

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
    ):
        super().__init__(descriptor, "LocalBaidu", renderer, fetcher)
