"""Tests for query formatting helpers."""

from datetime import date

import pytest

from websearch.models import SearchItem, SearchQuery
from websearch.query import build_search_url, clean_query, filter_http_items, format_query

TODAY = date(2024, 5, 17)


def test_format_query_with_time():
    assert format_query("python news", True, TODAY) == "today is 2024-05-17 \r\n python news"


def test_format_query_without_time():
    assert format_query("python news", False, TODAY) == "python news"


@pytest.mark.parametrize("question", ["python news", "what's new in 3.13?", "多个 关键词"])
def test_clean_recovers_formatted_question(question):
    """Test the scrape side sees the question the service formatted."""
    assert clean_query(format_query(question, True, TODAY)) == question
    assert clean_query(format_query(question, False, TODAY)) == question


def test_clean_query_uses_second_segment():
    assert clean_query("header\r\n question \r\ntrailer") == "question"


def test_search_query_formatted():
    assert SearchQuery("python", time_qualified=True).formatted(TODAY) == "today is 2024-05-17 \r\n python"
    assert SearchQuery("python").formatted(TODAY) == "python"


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("python asyncio", "https://www.google.com/search?q=python%20asyncio"),
        ("a&b=c", "https://www.google.com/search?q=a%26b%3Dc"),
        ("it's (fine)!", "https://www.google.com/search?q=it's%20(fine)!"),
        ("today is 2024-05-17 \r\n 中文", "https://www.google.com/search?q=%E4%B8%AD%E6%96%87"),
    ],
)
def test_build_search_url(query, expected):
    """Test the cleaned question is URI-component encoded into the template."""
    assert build_search_url("https://www.google.com/search?q=%s", query) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com", True),
        ("http://example.com", True),
        ("/relative", False),
        ("ftp://example.com", False),
        ("", False),
    ],
)
def test_item_is_http(url, expected):
    assert SearchItem("t", url).is_http is expected


def test_filter_http_items_then_caps():
    """Test non-http links are removed before the cap is applied."""
    items = [
        SearchItem("a", "/relative"),
        SearchItem("b", "https://b.example"),
        SearchItem("c", ""),
        SearchItem("d", "http://d.example"),
        SearchItem("e", "https://e.example"),
    ]

    assert [i.title for i in filter_http_items(items, 2)] == ["b", "d"]
    assert [i.title for i in filter_http_items(items, 10)] == ["b", "d", "e"]
    assert filter_http_items(items, 0) == []
