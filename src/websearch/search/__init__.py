"""
Search module.

Provides the web search service, providers, extractors and the provider registry.
"""

from websearch.search.base import BaseSearchProvider
from websearch.search.extractors import (
    BaiduExtractor,
    BaseExtractor,
    BingExtractor,
    GoogleExtractor,
    get_extractor,
)
from websearch.search.impl import (
    DefaultSearchProvider,
    ExaSearchProvider,
    SearxngSearchProvider,
    TavilySearchProvider,
)
from websearch.search.local import (
    LocalBaiduProvider,
    LocalBingProvider,
    LocalGoogleProvider,
    LocalSearchProvider,
)
from websearch.search.registry import (
    ProviderRegistry,
    register_builtin_providers,
)
from websearch.search.service import WebSearchService

register_builtin_providers()

__all__ = [
    "WebSearchService",
    "BaseSearchProvider",
    "TavilySearchProvider",
    "ExaSearchProvider",
    "SearxngSearchProvider",
    "DefaultSearchProvider",
    "LocalSearchProvider",
    "LocalGoogleProvider",
    "LocalBingProvider",
    "LocalBaiduProvider",
    "BaseExtractor",
    "GoogleExtractor",
    "BingExtractor",
    "BaiduExtractor",
    "get_extractor",
    "ProviderRegistry",
    "register_builtin_providers",
]
