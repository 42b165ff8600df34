"""Application-wide aiohttp ClientSession management"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Caps concurrent page fetches across every search running in the process
CONNECTION_LIMIT = 20
CONNECTION_LIMIT_PER_HOST = 5

_session: aiohttp.ClientSession | None = None


def new_client_session(timeout: float = 30.0) -> aiohttp.ClientSession:
    """Create a standalone session with the bounded connector and browser-like headers."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        connector=aiohttp.TCPConnector(limit=CONNECTION_LIMIT, limit_per_host=CONNECTION_LIMIT_PER_HOST),
        headers={"User-Agent": DEFAULT_USER_AGENT},
    )


def get_aiohttp_session() -> aiohttp.ClientSession:
    """Get the shared session (must be called inside aiohttp_session_manager)."""
    if _session is None:
        raise RuntimeError("aiohttp session not initialized. Use aiohttp_session_manager().")
    return _session


def current_aiohttp_session() -> aiohttp.ClientSession | None:
    """The shared session if one is active, else None."""
    return _session


@asynccontextmanager
async def aiohttp_session_manager(timeout: float = 30.0) -> AsyncIterator[aiohttp.ClientSession]:
    """Lifecycle of the application-level shared session."""
    global _session

    _session = new_client_session(timeout)

    try:
        yield _session
    finally:
        await _session.close()
        _session = None
