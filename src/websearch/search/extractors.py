"""
Result page extractors.

Each extractor turns the rendered result page of one search backend into a
list of ``SearchItem`` candidates. Extraction is pure and fail-soft: a page
that cannot be parsed yields an empty list, and a result container missing
its title or link is skipped on its own.
"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from bs4 import BeautifulSoup, Tag

from websearch.exceptions import ExtractionError
from websearch.models import SearchItem

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """Base class for backend-specific result page extractors."""

    kind: ClassVar[str] = ""

    def extract(self, markup: str) -> list[SearchItem]:
        """
        Extract candidate result links from raw markup.

        Args:
            markup: Rendered HTML of a backend result page.

        Returns:
            Candidates in page order. Duplicates are kept.
        """
        if not markup:
            return []
        try:
            return self._parse_markup(markup)
        except ExtractionError as e:
            logger.warning(f"[{self.kind}] {e}")
            return []

    def _parse_markup(self, markup: str) -> list[SearchItem]:
        try:
            items = list(self._parse(BeautifulSoup(markup, "html.parser")))
        except Exception as e:
            raise ExtractionError(f"Failed to parse search result page: {e}") from e
        logger.debug(f"[{self.kind}] extracted {len(items)} candidates")
        return items

    @abstractmethod
    def _parse(self, soup: BeautifulSoup) -> list[SearchItem]:
        """Select result containers and build items (implemented by subclasses)."""

    @staticmethod
    def _text(node: Tag) -> str:
        return node.get_text(strip=True)

    @staticmethod
    def _href(node: Tag | None) -> str:
        if node is None:
            return ""
        href = node.get("href")
        return href.strip() if isinstance(href, str) else ""


class GoogleExtractor(BaseExtractor):
    """Google: ``#search .MjjYud`` containers, first ``h3`` as title, first anchor as link."""

    kind = "google"

    def _parse(self, soup: BeautifulSoup) -> list[SearchItem]:
        results = []
        for container in soup.select("#search .MjjYud"):
            title = container.find("h3")
            link = container.find("a")
            url = self._href(link)
            if title is None or not url:
                continue
            results.append(SearchItem(title=self._text(title), url=url))
        return results


class BingExtractor(BaseExtractor):
    """Bing: ``#b_results h2`` headings, each wrapping the result anchor."""

    kind = "bing"

    def _parse(self, soup: BeautifulSoup) -> list[SearchItem]:
        results = []
        for heading in soup.select("#b_results h2"):
            link = heading.find("a")
            url = self._href(link)
            if link is None or not url:
                continue
            results.append(SearchItem(title=self._text(link), url=url))
        return results


class BaiduExtractor(BaseExtractor):
    """Baidu: ``#content_left .result h3`` headings, each wrapping the result anchor."""

    kind = "baidu"

    def _parse(self, soup: BeautifulSoup) -> list[SearchItem]:
        results = []
        for heading in soup.select("#content_left .result h3"):
            link = heading.find("a")
            url = self._href(link)
            if link is None or not url:
                continue
            results.append(SearchItem(title=self._text(link), url=url))
        return results


_EXTRACTORS: dict[str, BaseExtractor] = {
    extractor.kind: extractor for extractor in (GoogleExtractor(), BingExtractor(), BaiduExtractor())
}


def get_extractor(kind: str) -> BaseExtractor:
    """Look up the extractor for a backend kind (``google``, ``bing``, ``baidu``)."""
    try:
        return _EXTRACTORS[kind]
    except KeyError:
        raise KeyError(f"No extractor registered for '{kind}'") from None


def list_extractors() -> list[str]:
    return list(_EXTRACTORS.keys())
