"""
Web Search Service Interface

Defines the abstract interface for the web search service,
following the Dependency Inversion Principle.
"""

from abc import ABC, abstractmethod
from typing import Any

from websearch.models import ProviderDescriptor, SearchResponse, WebsearchIntent


class IWebSearchService(ABC):
    """
    Web Search Service Interface

    Resolves the active search provider, runs single searches and aggregates
    multi-question searches.
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Check if web search can run.

        Returns:
            bool: Whether the default provider exists and is usable
        """

    @abstractmethod
    def resolve_default_provider(self) -> ProviderDescriptor:
        """
        Get the default provider, falling back to the first configured one.

        Returns:
            ProviderDescriptor of the provider to use
        """

    @abstractmethod
    async def search(self, descriptor: ProviderDescriptor, query: str) -> SearchResponse:
        """
        Single search.

        Args:
            descriptor: Provider to search with
            query: Search query

        Returns:
            SearchResponse with results

        Raises:
            WebSearchException: Any failure, with the message prefixed "Search failed: "
        """

    @abstractmethod
    async def check_provider(self, descriptor: ProviderDescriptor) -> dict[str, Any]:
        """
        Connectivity check for a provider.

        Returns:
            Dict with ``valid`` and, on failure, ``error``
        """

    @abstractmethod
    async def process_aggregated_search(
        self, descriptor: ProviderDescriptor, intent: WebsearchIntent
    ) -> SearchResponse:
        """
        Search every question of an intent concurrently and merge the results.

        Args:
            descriptor: Provider to search with
            intent: Questions and optional links

        Returns:
            SearchResponse, never raises
        """
