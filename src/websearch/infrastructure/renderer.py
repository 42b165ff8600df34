"""
Page rendering surface.

Scrape-based search needs the rendered markup of a backend result page. The
surface that renders it (a scratch browser window in a desktop host) is a
scarce resource: every ``open_and_capture`` must be paired with exactly one
``close_session``. ``render_session`` is the only way this package opens one.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol, runtime_checkable
from uuid import uuid4

import aiohttp

from websearch.infrastructure.http_client import new_client_session

logger = logging.getLogger(__name__)


@runtime_checkable
class PageRenderer(Protocol):
    """Transient browsing context used to capture a page's rendered markup."""

    async def open_and_capture(self, session_id: str, url: str) -> str:
        """Open a context under ``session_id``, navigate to ``url`` and return its markup."""
        ...

    async def close_session(self, session_id: str) -> None:
        """Release the context opened under ``session_id``."""
        ...


class HttpPageRenderer:
    """
    Renderer backed by plain HTTP requests.

    Each session id owns its own aiohttp session, so the open/close pairing is
    observable the same way a browser window would be. No JavaScript is run.
    """

    def __init__(self, timeout: float = 30.0):
        self._timeout = timeout
        self._sessions: dict[str, aiohttp.ClientSession] = {}

    @property
    def open_sessions(self) -> int:
        return len(self._sessions)

    async def open_and_capture(self, session_id: str, url: str) -> str:
        if session_id in self._sessions:
            raise ValueError(f"Render session already open: {session_id}")

        session = new_client_session(self._timeout)
        self._sessions[session_id] = session
        logger.debug(f"[Renderer] {session_id} -> {url}")

        async with session.get(url) as response:
            response.raise_for_status()
            return await response.text(errors="replace")

    async def close_session(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            await session.close()
            logger.debug(f"[Renderer] closed {session_id}")


def new_session_id() -> str:
    return f"search-window-{uuid4().hex}"


@asynccontextmanager
async def render_session(renderer: PageRenderer, url: str) -> AsyncIterator[str]:
    """
    Open a render session for ``url`` and yield its markup.

    The session is closed exactly once when the block exits, whether it
    returns, raises or is cancelled.
    """
    session_id = new_session_id()
    try:
        yield await renderer.open_and_capture(session_id, url)
    finally:
        await asyncio.shield(renderer.close_session(session_id))
