"""
Web search service.

Resolves the active provider from the shared configuration, runs single
searches and aggregates multi-question searches.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from websearch.config.storage import ConfigStore
from websearch.exceptions import (
    InvalidInputError,
    NoProvidersAvailableError,
    as_search_failure,
    handle_errors,
)
from websearch.infrastructure.fetcher import ContentFetcher
from websearch.infrastructure.renderer import PageRenderer
from websearch.models import (
    ProviderDescriptor,
    SearchQuery,
    SearchResponse,
    WebSearchConfiguration,
    WebsearchIntent,
)
from websearch.search.interface import IWebSearchService
from websearch.search.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class WebSearchService(IWebSearchService):
    """
    Web search service.

    Features:
    1. Default provider resolution with fallback to the first configured one
    2. Optional date-qualified queries
    3. Concurrent multi-question search with settle-all aggregation
    4. Direct fetch of given links for summarization requests
    """

    # Query sent by check_provider
    CHECK_QUERY = "test query"

    SUMMARIES_QUERY = "summaries"

    QUERY_SEPARATOR = " | "

    def __init__(
        self,
        store: ConfigStore,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the web search service.

        Args:
            store: Shared configuration store.
            renderer: Render surface for scrape-based providers.
            fetcher: Content fetcher shared by all providers built here.
            today: Clock used for date-qualified queries.
        """
        self._store = store
        self._renderer = renderer
        self._fetcher = fetcher or ContentFetcher(renderer)
        self._today = today

    @property
    def configuration(self) -> WebSearchConfiguration:
        return self._store.snapshot()

    def is_enabled(self) -> bool:
        provider = self.configuration.default_provider
        if provider is None:
            return False

        if provider.is_local:
            return True
        if provider.api_key is not None:
            return provider.api_key != ""
        if provider.api_host is not None:
            return provider.api_host != ""
        return False

    def is_overwrite_enabled(self) -> bool:
        return self.configuration.overwrite_enabled

    def resolve_default_provider(self) -> ProviderDescriptor:
        """
        Get the configured default provider.

        When the default id matches no provider, the first configured provider
        is used and persisted as the new default.

        Raises:
            NoProvidersAvailableError: No provider is configured.
        """
        while True:
            config = self._store.snapshot()
            provider = config.default_provider
            if provider is not None:
                return provider

            if not config.providers:
                raise NoProvidersAvailableError()

            fallback = config.providers[0]
            if self._store.compare_and_set_default(config.default_provider_id, fallback.id):
                logger.warning(
                    f"Default provider '{config.default_provider_id}' not found, falling back to '{fallback.id}'"
                )
                return fallback

    async def search(self, descriptor: ProviderDescriptor, query: str) -> SearchResponse:
        if not query or not query.strip():
            raise as_search_failure(InvalidInputError("Search query cannot be empty"))

        config = self._store.snapshot()
        formatted = SearchQuery(query, time_qualified=config.search_with_time).formatted(self._today())
        provider = ProviderRegistry.create_provider(descriptor, self._renderer, self._fetcher)

        try:
            return await provider.search(formatted, config)
        except Exception as e:
            logger.error(f"[{provider.name}] {e}")
            failure = as_search_failure(e)
            if failure is e:
                raise
            raise failure from e

    async def check_provider(self, descriptor: ProviderDescriptor) -> dict[str, Any]:
        try:
            response = await self.search(descriptor, self.CHECK_QUERY)
        except Exception as e:
            logger.warning(f"Provider check failed for '{descriptor.id}': {e}")
            return {"valid": False, "error": str(e)}

        logger.debug(f"Provider check for '{descriptor.id}' returned {len(response.results)} results")
        return {"valid": True}

    @handle_errors("Failed to process aggregated search", default_return=SearchResponse.empty())
    async def process_aggregated_search(
        self, descriptor: ProviderDescriptor, intent: WebsearchIntent
    ) -> SearchResponse:
        if not intent.questions:
            logger.info("No questions to search")
            return SearchResponse.empty()

        if intent.wants_summary:
            return await self._summarize(intent.links)

        questions = list(intent.questions)
        tasks = [self.search(descriptor, question) for question in questions]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        aggregated = []
        for question, outcome in zip(questions, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning(f"Search for '{question}' failed: {outcome}")
                continue
            aggregated.extend(outcome.results)

        logger.info(f"Aggregated {len(aggregated)} results from {len(questions)} questions")
        return SearchResponse(query=self.QUERY_SEPARATOR.join(questions), results=tuple(aggregated))

    async def _summarize(self, links: Sequence[str]) -> SearchResponse:
        """Fetch the given links directly, skipping search."""
        config = self._store.snapshot()
        fetched = await self._fetcher.fetch_many(list(links), "markdown")
        results = tuple(r.truncated(config.content_limit) for r in fetched if not r.is_empty)
        logger.info(f"Fetched {len(results)}/{len(links)} links for summarization")
        return SearchResponse(query=self.SUMMARIES_QUERY, results=results)
