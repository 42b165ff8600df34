"""
Remote search API implementations.

Providers that query a hosted search API instead of scraping a result page.
"""

import logging
from typing import Any

import httpx
from tavily import AsyncTavilyClient

from websearch.exceptions import ConfigurationError, ProviderError
from websearch.infrastructure.fetcher import ContentFetcher
from websearch.models import FetchedResult, ProviderDescriptor, SearchItem, SearchResponse, WebSearchConfiguration
from websearch.query import filter_http_items
from websearch.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)


def _parse_error(response: httpx.Response) -> str:
    """Best-effort error message from a failed API response."""
    try:
        if response.headers.get("content-type", "").startswith("application/json"):
            error_data = response.json()
            if isinstance(error_data, dict):
                for key in ("message", "error", "detail"):
                    if key in error_data:
                        return f"HTTP {response.status_code}: {error_data[key]}"
            return f"HTTP {response.status_code}: {error_data}"
        return f"HTTP {response.status_code}: {response.text[:200]}"
    except ValueError:
        logger.debug("Failed to extract error message from response")
        return f"HTTP {response.status_code}: {response.text[:200]}"


class TavilySearchProvider(BaseSearchProvider):
    """
    Tavily Search Engine.

    Features:
    - AI/LLM optimized search API
    - Returns page content with each result, no fetch stage needed
    """

    def __init__(self, descriptor: ProviderDescriptor, fetcher: ContentFetcher | None = None):
        super().__init__(descriptor, "Tavily", fetcher)

    @property
    def is_available(self) -> bool:
        return bool(self._descriptor.api_key)

    def _unavailable_reason(self) -> str:
        return "Tavily API key not configured"

    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        """Execute Tavily search."""
        client = AsyncTavilyClient(api_key=self._descriptor.api_key)

        response = await client.search(
            query=query,
            search_depth="advanced",
            max_results=max(1, config.max_results),
            include_answer=False,
            include_raw_content=False,
        )

        results = []
        for item in response.get("results", []):
            results.append(
                FetchedResult(
                    title=item.get("title") or "",
                    url=item.get("url") or "",
                    content=item.get("content") or "",
                )
            )

        return SearchResponse(query=query, results=tuple(results))


class ExaSearchProvider(BaseSearchProvider):
    """
    Exa Search Engine.

    Features:
    - Neural search API
    - Returns page text with each result

    Docs: https://docs.exa.ai/
    """

    DEFAULT_API_HOST = "https://api.exa.ai"

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        fetcher: ContentFetcher | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(descriptor, "Exa", fetcher)
        self._api_host = (descriptor.api_host or self.DEFAULT_API_HOST).rstrip("/")
        self._transport = transport

    @property
    def is_available(self) -> bool:
        return bool(self._descriptor.api_key)

    def _unavailable_reason(self) -> str:
        return "Exa API key not configured"

    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        """Execute Exa search."""
        headers = {"x-api-key": self._descriptor.api_key or "", "Content-Type": "application/json"}
        payload = {
            "query": query,
            "numResults": max(1, config.max_results),
            "contents": {"text": True},
        }

        async with httpx.AsyncClient(timeout=15, transport=self._transport) as client:
            response = await client.post(f"{self._api_host}/search", headers=headers, json=payload)

        if response.status_code != 200:
            raise ProviderError(_parse_error(response))

        data: dict[str, Any] = response.json()
        logger.debug(f"[Exa] raw response: {data}")

        results = []
        for item in data.get("results", []):
            results.append(
                FetchedResult(
                    title=item.get("title") or "",
                    url=item.get("url") or "",
                    content=item.get("text") or "",
                )
            )

        return SearchResponse(query=query, results=tuple(results))


class SearxngSearchProvider(BaseSearchProvider):
    """
    SearXNG Search Engine.

    Features:
    - Open-source meta search engine, privacy-respecting
    - Supports self-hosted instances with Basic Auth
    - Returns links only, page content is fetched per result

    Docs: https://docs.searxng.org/
    """

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        fetcher: ContentFetcher | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(descriptor, "SearXNG", fetcher)
        self._api_host = (descriptor.api_host or "").rstrip("/")
        self._transport = transport

    @property
    def is_available(self) -> bool:
        return bool(self._api_host)

    def _unavailable_reason(self) -> str:
        return "SearXNG API host not configured"

    def _get_auth(self) -> httpx.BasicAuth | None:
        """Get Basic Auth credentials."""
        username = self._descriptor.basic_auth_username
        password = self._descriptor.basic_auth_password
        if username and password:
            return httpx.BasicAuth(username, password)
        return None

    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        """Execute SearXNG search, then fetch each result page."""
        params = {
            "q": query,
            "format": "json",
            "language": "auto",
            "safesearch": "0",
            "pageno": "1",
        }
        headers = {"Accept": "application/json"}

        async with httpx.AsyncClient(timeout=15, transport=self._transport, auth=self._get_auth()) as client:
            response = await client.get(f"{self._api_host}/search", params=params, headers=headers)

        if response.status_code == 401:
            raise ConfigurationError("SearXNG authentication failed, check username and password")
        if response.status_code != 200:
            raise ProviderError(_parse_error(response))

        data: dict[str, Any] = response.json()
        logger.debug(f"[SearXNG] raw response: {data}")

        candidates = [
            SearchItem(title=item.get("title") or "", url=item.get("url") or "") for item in data.get("results", [])
        ]
        items = filter_http_items(candidates, config.max_results)

        results = await self._fetch_contents(items)
        return SearchResponse(query=query, results=tuple(results))


class DefaultSearchProvider(BaseSearchProvider):
    """Stand-in for provider ids with no search backend; every search fails with a configuration error."""

    def __init__(self, descriptor: ProviderDescriptor, fetcher: ContentFetcher | None = None):
        super().__init__(descriptor, descriptor.display_name, fetcher)

    @property
    def is_available(self) -> bool:
        return False

    def _unavailable_reason(self) -> str:
        return f"No search backend for provider '{self._descriptor.id}'"

    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        raise ConfigurationError(self._unavailable_reason())
