"""
Base classes for search engine providers.

Defines the single ``search`` contract every provider honors and the content
fan-out shared by providers that only return links.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence

from websearch.exceptions import ConfigurationError, InvalidInputError, ProviderError
from websearch.infrastructure.fetcher import ContentFetcher
from websearch.models import (
    NO_CONTENT,
    FetchedResult,
    ProviderDescriptor,
    SearchItem,
    SearchResponse,
    WebSearchConfiguration,
)

logger = logging.getLogger(__name__)


class BaseSearchProvider(ABC):
    """Base class for search engine providers."""

    def __init__(self, descriptor: ProviderDescriptor, name: str, fetcher: ContentFetcher | None = None):
        """
        Initialize the search engine provider.

        Args:
            descriptor: Configured backend this provider wraps.
            name: Name of the search engine, used in logs.
            fetcher: Content fetcher for providers that fetch result pages.
        """
        self._descriptor = descriptor
        self._name = name
        self._fetcher = fetcher or ContentFetcher()

    @property
    def name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    @property
    def is_available(self) -> bool:
        """Check if the provider has a usable endpoint or credential."""
        return True

    def _unavailable_reason(self) -> str:
        return f"{self._name} is not configured"

    @abstractmethod
    async def _do_search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        """Execute search (implemented by subclasses)."""

    async def search(self, query: str, config: WebSearchConfiguration) -> SearchResponse:
        """
        Execute search using the template method pattern.

        Args:
            query: Search query string, possibly date-prefixed.
            config: Configuration snapshot for this invocation.

        Returns:
            SearchResponse holding at most ``config.max_results`` non-empty
            results, each truncated to ``config.content_limit``.

        Raises:
            InvalidInputError: The query is empty.
            ConfigurationError: The provider has no usable endpoint or credential.
            ProviderError: Any other failure, with a uniform message.
        """
        if not query or not query.strip():
            raise InvalidInputError("Search query cannot be empty")
        if not self.is_available:
            raise ConfigurationError(self._unavailable_reason())

        start_time = time.time()
        try:
            response = await self._do_search(query, config)
        except (InvalidInputError, ConfigurationError):
            raise
        except Exception as e:
            logger.error(f"[{self._name}] search '{query}' failed: {e}")
            raise ProviderError.wrap(e) from e

        response = self._finalize(response, config)
        logger.info(
            f"[{self._name}] search '{query}' returned {len(response.results)} results "
            f"in {time.time() - start_time:.2f}s"
        )
        return response

    @staticmethod
    def _finalize(response: SearchResponse, config: WebSearchConfiguration) -> SearchResponse:
        """Drop empty results, cap the count and apply the content limit."""
        results = [r for r in response.results if not r.is_empty]
        results = results[: max(config.max_results, 0)]
        results = [r.truncated(config.content_limit) for r in results]
        return SearchResponse(query=response.query, results=tuple(results))

    async def _fetch_contents(self, items: Sequence[SearchItem]) -> list[FetchedResult]:
        """
        Fetch every item's page concurrently.

        A failing fetch becomes a ``NO_CONTENT`` result for that item only.
        Results follow the order of ``items``, not completion order.
        """
        using_browser = self._descriptor.using_browser
        tasks = [self._fetcher.fetch(item.url, "markdown", using_browser) for item in items]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for item, outcome in zip(items, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning(f"[{self._name}] fetch failed for {item.url}: {outcome}")
                results.append(FetchedResult(title=item.title, url=item.url, content=NO_CONTENT))
            else:
                results.append(outcome)
        return results
