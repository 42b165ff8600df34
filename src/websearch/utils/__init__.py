"""Utilities."""

from websearch.utils.logging_config import get_console, setup_logging

__all__ = [
    "get_console",
    "setup_logging",
]
