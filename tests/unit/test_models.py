"""Tests for search data models."""

import dataclasses

import pytest

from websearch.models import (
    MIN_CONTENT_LIMIT,
    NO_CONTENT,
    FetchedResult,
    ProviderDescriptor,
    SearchResponse,
    WebSearchConfiguration,
    WebsearchIntent,
)


class TestFetchedResult:
    def test_default_content_is_empty(self):
        result = FetchedResult(title="t", url="https://x")
        assert result.content == NO_CONTENT
        assert result.is_empty

    def test_blank_content_is_empty(self):
        assert FetchedResult(title="t", url="https://x", content="  \n").is_empty

    @pytest.mark.parametrize("limit", [None, 0, -1, 11, 50])
    def test_truncated_noop(self, limit):
        result = FetchedResult(title="t", url="u", content="hello world")
        assert result.truncated(limit) is result

    def test_truncated_includes_marker_in_limit(self):
        result = FetchedResult(title="t", url="u", content="abcdefghijklmnop")
        truncated = result.truncated(10)
        assert truncated.content == "abcdefg..."
        assert len(truncated.content) == 10
        assert result.content == "abcdefghijklmnop"

    def test_truncated_tiny_limit(self):
        """Test the length cap wins over the marker below the configurable minimum."""
        assert FetchedResult(title="t", url="u", content="abcdef").truncated(2).content == "ab"

    def test_truncated_smallest_configurable_limit(self):
        truncated = FetchedResult(title="t", url="u", content="abcdefgh").truncated(MIN_CONTENT_LIMIT)
        assert truncated.content == "a..."

    def test_frozen(self):
        result = FetchedResult(title="t", url="u")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.title = "other"


def test_search_response_to_dict():
    response = SearchResponse(query="q", results=(FetchedResult(title="t", url="u", content="c"),))
    assert response.to_dict() == {"query": "q", "results": [{"title": "t", "url": "u", "content": "c"}]}
    assert SearchResponse.empty().to_dict() == {"query": "", "results": []}


def test_provider_descriptor():
    assert ProviderDescriptor(id="local-bing").is_local
    assert not ProviderDescriptor(id="tavily").is_local
    assert ProviderDescriptor(id="exa").display_name == "exa"
    assert ProviderDescriptor(id="exa", name="Exa").display_name == "Exa"


def test_configuration_lookup():
    bing = ProviderDescriptor(id="local-bing")
    config = WebSearchConfiguration(default_provider_id="local-bing", providers=(ProviderDescriptor(id="exa"), bing))

    assert config.find_provider("local-bing") is bing
    assert config.find_provider("missing") is None
    assert config.default_provider is bing

    moved = config.with_default_provider("exa")
    assert moved.default_provider.id == "exa"
    assert config.default_provider_id == "local-bing"


@pytest.mark.parametrize(
    ("intent", "expected"),
    [
        (WebsearchIntent(questions=("summarize",), links=("https://a",)), True),
        (WebsearchIntent(questions=("summarize",)), False),
        (WebsearchIntent(questions=("python", "summarize"), links=("https://a",)), False),
        (WebsearchIntent(), False),
    ],
)
def test_intent_wants_summary(intent, expected):
    assert intent.wants_summary is expected
