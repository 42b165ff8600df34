"""
Provider registry.

Maps provider ids to factories and builds provider instances. Creation is
total: ids with no registered factory get a ``DefaultSearchProvider``.
"""

import logging
from collections.abc import Callable
from typing import ClassVar

from websearch.infrastructure.fetcher import ContentFetcher
from websearch.infrastructure.renderer import PageRenderer
from websearch.models import ProviderDescriptor
from websearch.search.base import BaseSearchProvider

logger = logging.getLogger(__name__)

# Provider factory function type: (descriptor, renderer, fetcher) -> provider
ProviderFactory = Callable[[ProviderDescriptor, PageRenderer | None, ContentFetcher | None], BaseSearchProvider]


class ProviderRegistry:
    """Registry for managing search engine provider registration and creation."""

    _providers: ClassVar[dict[str, ProviderFactory]] = {}

    @classmethod
    def register(cls, provider_id: str, factory: ProviderFactory) -> None:
        """
        Register a new provider.

        Args:
            provider_id: Provider id (unique identifier).
            factory: Factory function to create provider instances.
        """
        cls._providers[provider_id] = factory
        logger.debug(f"Registered search provider: {provider_id}")

    @classmethod
    def unregister(cls, provider_id: str) -> None:
        cls._providers.pop(provider_id, None)

    @classmethod
    def create_provider(
        cls,
        descriptor: ProviderDescriptor,
        renderer: PageRenderer | None = None,
        fetcher: ContentFetcher | None = None,
    ) -> BaseSearchProvider:
        """
        Create a provider instance.

        Args:
            descriptor: Configured backend.
            renderer: Render surface handed to scrape-based providers.
            fetcher: Content fetcher shared by the providers of one service.

        Returns:
            Provider instance; ``DefaultSearchProvider`` when the id is unknown.
        """
        from websearch.search.impl import DefaultSearchProvider

        factory = cls._providers.get(descriptor.id)
        if factory is None:
            logger.debug(f"No provider registered for '{descriptor.id}', using default")
            return DefaultSearchProvider(descriptor, fetcher)
        return factory(descriptor, renderer, fetcher)

    @classmethod
    def list_providers(cls) -> list[str]:
        """Get a list of all registered provider ids."""
        return list(cls._providers.keys())

    @classmethod
    def is_registered(cls, provider_id: str) -> bool:
        """Check if a provider is registered."""
        return provider_id in cls._providers


def register_builtin_providers() -> None:
    """Register all built-in search engine providers."""
    # Delay import to avoid circular dependencies
    from websearch.search.impl import ExaSearchProvider, SearxngSearchProvider, TavilySearchProvider
    from websearch.search.local import LocalBaiduProvider, LocalBingProvider, LocalGoogleProvider

    # Remote APIs
    ProviderRegistry.register("tavily", lambda d, r, f: TavilySearchProvider(d, f))
    ProviderRegistry.register("searxng", lambda d, r, f: SearxngSearchProvider(d, f))
    ProviderRegistry.register("exa", lambda d, r, f: ExaSearchProvider(d, f))

    # Result page scraping
    ProviderRegistry.register("local-google", lambda d, r, f: LocalGoogleProvider(d, r, f))
    ProviderRegistry.register("local-bing", lambda d, r, f: LocalBingProvider(d, r, f))
    ProviderRegistry.register("local-baidu", lambda d, r, f: LocalBaiduProvider(d, r, f))

    logger.debug(f"Registered {len(ProviderRegistry.list_providers())} search providers")
