"""
Query formatting helpers.

``format_query`` and ``clean_query`` are two halves of one convention: the
service may prefix a question with a ``today is ...`` line, and scrape-based
providers strip that line again before building the backend URL.
"""

from collections.abc import Iterable
from datetime import date
from urllib.parse import quote

from websearch.models import SearchItem

LINE_BREAK = "\r\n"

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def format_query(text: str, search_with_time: bool, today: date) -> str:
    """Prefix ``text`` with the current date when time-qualified search is on."""
    if not search_with_time:
        return text
    return f"today is {today.strftime('%Y-%m-%d')} {LINE_BREAK} {text}"


def clean_query(text: str) -> str:
    """
    Return the effective question of a possibly date-prefixed query.

    When the query contains a CRLF, the second CRLF-delimited segment is the
    question; otherwise the query is used verbatim.
    """
    if LINE_BREAK not in text:
        return text
    return text.split(LINE_BREAK)[1].strip()


def build_search_url(template: str, query: str) -> str:
    """Substitute the encoded, cleaned query into a ``%s`` URL template."""
    return template.replace("%s", quote(clean_query(query), safe=_URI_COMPONENT_SAFE))


def filter_http_items(items: Iterable[SearchItem], limit: int) -> list[SearchItem]:
    """Keep http(s) items, at most ``limit`` of them, in input order."""
    valid = [item for item in items if item.is_http]
    return valid[: max(limit, 0)]
