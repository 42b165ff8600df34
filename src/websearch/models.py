"""
Data models for web search.

Contains the query, item, result and response value objects plus the
provider descriptors and the search configuration snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

# Marker for a fetch that produced no usable content
NO_CONTENT = "No content found"

# Appended to content cut at the configured limit
TRUNCATION_MARKER = "..."

# Smallest limit that still leaves room for one character before the marker
MIN_CONTENT_LIMIT = len(TRUNCATION_MARKER) + 1

LOCAL_PROVIDER_PREFIX = "local-"

# First question that asks for the given links to be summarized instead of searched
SUMMARIZE_QUESTION = "summarize"


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """A single question as submitted by the caller."""

    text: str
    time_qualified: bool = False

    def formatted(self, today: date) -> str:
        """Provider-facing query text, prefixed with the date when time-qualified."""
        from websearch.query import format_query

        return format_query(self.text, self.time_qualified, today)


@dataclass(frozen=True, slots=True)
class SearchItem:
    """Candidate result link extracted from a backend's result page."""

    title: str
    url: str

    @property
    def is_http(self) -> bool:
        return self.url.startswith("http") or self.url.startswith("https")


@dataclass(frozen=True, slots=True)
class FetchedResult:
    """A result link together with its normalized page content."""

    title: str
    url: str
    content: str = NO_CONTENT

    @property
    def is_empty(self) -> bool:
        """Whether the fetch produced no usable content."""
        return self.content == NO_CONTENT or not self.content.strip()

    def truncated(self, limit: int | None) -> "FetchedResult":
        """
        Return a copy whose content is at most ``limit`` characters.

        Content cut at the limit ends with ``TRUNCATION_MARKER``; the marker counts
        towards the limit.
        """
        if not limit or limit <= 0 or len(self.content) <= limit:
            return self
        if limit <= len(TRUNCATION_MARKER):
            return replace(self, content=self.content[:limit])
        keep = limit - len(TRUNCATION_MARKER)
        return replace(self, content=self.content[:keep] + TRUNCATION_MARKER)

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "content": self.content}


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """
    Outcome of one search invocation.

    ``query`` is either the single question searched or, for aggregated runs,
    every question joined by ``" | "`` in submission order.
    """

    query: str = ""
    results: tuple[FetchedResult, ...] = ()

    @classmethod
    def empty(cls, query: str = "") -> "SearchResponse":
        return cls(query=query, results=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    """
    One configured search backend.

    Local (scrape-based) backends carry a ``url`` template with a ``%s``
    placeholder; remote backends carry ``api_host`` and/or ``api_key``.
    """

    id: str
    name: str = ""
    url: str | None = None
    api_host: str | None = None
    api_key: str | None = None
    using_browser: bool = False
    is_system: bool = False
    basic_auth_username: str | None = None
    basic_auth_password: str | None = None

    @property
    def is_local(self) -> bool:
        return self.id.startswith(LOCAL_PROVIDER_PREFIX)

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True, slots=True)
class WebSearchConfiguration:
    """Read-only snapshot of the process-wide search configuration."""

    default_provider_id: str = ""
    max_results: int = 5
    content_limit: int | None = None
    overwrite_enabled: bool = False
    search_with_time: bool = True
    providers: tuple[ProviderDescriptor, ...] = field(default_factory=tuple)

    def find_provider(self, provider_id: str) -> ProviderDescriptor | None:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        return None

    @property
    def default_provider(self) -> ProviderDescriptor | None:
        return self.find_provider(self.default_provider_id)

    def with_default_provider(self, provider_id: str) -> "WebSearchConfiguration":
        return replace(self, default_provider_id=provider_id)


@dataclass(frozen=True, slots=True)
class WebsearchIntent:
    """Questions (and optional links) extracted from an assistant reply."""

    questions: tuple[str, ...] = ()
    links: tuple[str, ...] = ()

    @property
    def wants_summary(self) -> bool:
        """First question is the ``summarize`` sentinel and links are present."""
        return bool(self.questions) and self.questions[0] == SUMMARIZE_QUESTION and bool(self.links)
