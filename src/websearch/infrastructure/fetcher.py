"""
Web content fetcher.

Retrieves a page and converts it into markdown, html or plain text. Fetching
is fail-soft: any failure (invalid URL, network error, timeout, nothing
extractable) yields a ``FetchedResult`` carrying ``NO_CONTENT`` instead of an
exception, so that one bad link never aborts a fan-out.

Key strategies:
1. Download through the shared aiohttp session when one is active
2. Exponential backoff retry for transient network errors (tenacity)
3. Optional rendering through a ``PageRenderer`` for script-heavy pages
4. Main-content extraction with trafilatura
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Literal
from urllib.parse import urlparse

import aiohttp
import trafilatura
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from websearch.exceptions import FetchError
from websearch.infrastructure.http_client import current_aiohttp_session, new_client_session
from websearch.infrastructure.renderer import PageRenderer, render_session
from websearch.models import NO_CONTENT, FetchedResult

logger = logging.getLogger(__name__)

ContentFormat = Literal["markdown", "html", "text"]

_TRAFILATURA_FORMATS: dict[str, str] = {
    "markdown": "markdown",
    "html": "html",
    "text": "txt",
}

_TRANSIENT_STATUS = {429, 500, 502, 503, 504}


class TransientHTTPError(FetchError):
    """Retryable HTTP status."""


def _validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FetchError(f"Invalid URL: {url}")


class ContentFetcher:
    """
    Fetch and normalize page content.

    Args:
        renderer: Surface used when ``using_browser`` is requested. Without one,
            browser fetches fall back to a plain download.
        timeout: Upper bound in seconds for one fetch, retries included.
    """

    def __init__(self, renderer: PageRenderer | None = None, timeout: float = 30.0):
        self._renderer = renderer
        self._timeout = timeout

    async def fetch(
        self,
        url: str,
        format: ContentFormat = "markdown",
        using_browser: bool = False,
    ) -> FetchedResult:
        """
        Fetch one URL.

        Returns:
            FetchedResult whose content is ``NO_CONTENT`` when nothing usable
            could be retrieved.
        """
        try:
            return await asyncio.wait_for(self._fetch(url, format, using_browser), timeout=self._timeout)
        except TimeoutError:
            logger.warning(f"[Fetcher] timed out after {self._timeout}s: {url}")
        except Exception as e:
            logger.warning(f"[Fetcher] failed to fetch {url}: {e}")
        return FetchedResult(title=url, url=url, content=NO_CONTENT)

    async def fetch_many(
        self,
        urls: Sequence[str],
        format: ContentFormat = "markdown",
        using_browser: bool = False,
    ) -> list[FetchedResult]:
        """Fetch every URL concurrently; results follow the order of ``urls``."""
        tasks = [self.fetch(url, format, using_browser) for url in urls]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for url, outcome in zip(urls, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning(f"[Fetcher] failed to fetch {url}: {outcome}")
                results.append(FetchedResult(title="Error", url=url, content=NO_CONTENT))
            else:
                results.append(outcome)
        return results

    async def _fetch(self, url: str, format: ContentFormat, using_browser: bool) -> FetchedResult:
        _validate_url(url)

        if using_browser and self._renderer is not None:
            async with render_session(self._renderer, url) as markup:
                html = markup
        else:
            if using_browser:
                logger.debug("[Fetcher] no renderer configured, downloading directly")
            html = await self._download(url)

        title, content = self._convert(html, url, format)
        return FetchedResult(title=title, url=url, content=content or NO_CONTENT)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[aiohttp.ClientSession]:
        shared = current_aiohttp_session()
        if shared is not None:
            yield shared
            return
        async with new_client_session(self._timeout) as session:
            yield session

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type((aiohttp.ClientConnectionError, TransientHTTPError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _download(self, url: str) -> str:
        async with self._client() as session, session.get(url) as response:
            if response.status in _TRANSIENT_STATUS:
                raise TransientHTTPError(f"HTTP {response.status} for {url}")
            if response.status != 200:
                raise FetchError(f"HTTP {response.status} for {url}")
            return await response.text(errors="replace")

    @staticmethod
    def _convert(html: str, url: str, format: ContentFormat) -> tuple[str, str]:
        """Extract (title, content) from raw HTML."""
        if not html:
            return url, ""

        metadata = trafilatura.extract_metadata(html, default_url=url)
        title = metadata.title if metadata is not None and metadata.title else url

        content = trafilatura.extract(
            html,
            url=url,
            output_format=_TRAFILATURA_FORMATS.get(format, "markdown"),
            include_links=format != "text",
            include_formatting=format == "markdown",
        )
        return title, content or ""
