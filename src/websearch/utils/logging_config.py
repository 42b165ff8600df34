"""Logging configuration module"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Third-party loggers that report every request or extraction step
NOISY_LOGGERS = (
    "aiohttp",
    "aiohttp.client",
    "asyncio",
    "charset_normalizer",
    "courlan",
    "htmldate",
    "httpcore",
    "httpx",
    "tavily",
    "trafilatura",
)

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"

SEARCH_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "green",
        "logging.level.warning": "yellow",
        "logging.level.error": "red bold",
        "search.query": "bold cyan",
        "search.title": "bold",
        "search.url": "dim blue",
        "search.ok": "green",
        "search.fail": "red",
        "search.error": "bold red",
    }
)

_console: Console | None = None


def get_console() -> Console:
    """Shared console for log output and command results."""
    global _console
    if _console is None:
        _console = Console(theme=SEARCH_THEME)
    return _console


def _console_handler(debug: bool, level: str) -> logging.Handler:
    handler = RichHandler(
        console=get_console(),
        show_path=debug,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
        omit_repeated_times=True,
        markup=False,
    )
    handler.setLevel(logging.DEBUG if debug else logging.getLevelName(level.upper()))
    # RichHandler renders time and level itself
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _debug_file_handler(log_dir: str) -> tuple[logging.Handler, Path]:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"websearch_debug_{datetime.now():%Y%m%d_%H%M%S}.log"

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler, path


def setup_logging(debug: bool = False, log_dir: str = "./logs", level: str = "INFO") -> None:
    """
    Route all log records to the rich console, plus a file in debug mode.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        debug: Log everything and keep a debug log file under ``log_dir``
        log_dir: Directory of the debug log file
        level: Console threshold outside debug mode
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    root.addHandler(_console_handler(debug, level))

    if debug:
        handler, path = _debug_file_handler(log_dir)
        root.addHandler(handler)
        logging.getLogger(__name__).debug(f"Debug log: {path.absolute()}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
