"""
Exception hierarchy for web search.
"""

import inspect
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class WebSearchException(Exception):
    """Base exception for web search."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class InvalidInputError(WebSearchException):
    """Empty query or missing required provider setting."""

    def __init__(self, message: str = "Invalid search input", code: str | None = None):
        super().__init__(message, code)


class ConfigurationError(WebSearchException):
    """Provider has no usable endpoint or credential."""

    def __init__(self, message: str = "Search provider is not configured", code: str | None = None):
        super().__init__(message, code)


class NoProvidersAvailableError(ConfigurationError):
    """No search provider is configured at all."""

    def __init__(self, message: str = "No web search providers available", code: str | None = None):
        super().__init__(message, code)


class FetchError(WebSearchException):
    """Content fetch for a single link failed."""

    def __init__(self, message: str = "Failed to fetch web content", code: str | None = None):
        super().__init__(message, code)


class ExtractionError(WebSearchException):
    """Result page markup could not be parsed."""

    def __init__(self, message: str = "Failed to extract search results", code: str | None = None):
        super().__init__(message, code)


class ProviderError(WebSearchException):
    """Unexpected failure inside a provider's search."""

    PREFIX = "Search failed: "

    def __init__(self, message: str = "Unknown error", code: str | None = None):
        if not message.startswith(self.PREFIX):
            message = f"{self.PREFIX}{message}"
        super().__init__(message, code)

    @classmethod
    def wrap(cls, error: BaseException) -> "ProviderError":
        """Wrap an arbitrary error with the uniform search-failure message."""
        if isinstance(error, ProviderError):
            return error
        return cls(str(error) or type(error).__name__)


def as_search_failure(error: BaseException) -> WebSearchException:
    """
    Give ``error`` the uniform search-failure message.

    Typed search errors keep their class and code so callers can still tell an
    invalid input from a missing credential; anything else becomes ``ProviderError``.
    """
    if isinstance(error, ProviderError):
        return error
    if isinstance(error, WebSearchException):
        if error.message.startswith(ProviderError.PREFIX):
            return error
        return type(error)(f"{ProviderError.PREFIX}{error.message}", error.code)
    return ProviderError.wrap(error)


def _log(log_level: str, msg: str) -> None:
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "info":
        logger.info(msg)
    elif log_level == "warning":
        logger.warning(msg)
    else:
        logger.error(msg)


def handle_errors(
    error_message: str,
    default_return: Any = None,
    raise_on: tuple[type[Exception], ...] = (),
    log_level: str = "error",
) -> Callable[[F], F]:
    """Error handling decorator.

    Logs any exception raised by the wrapped function and returns a default
    value instead. Works for both plain and ``async`` functions.

    Args:
        error_message: Prefix for the logged message
        default_return: Value returned when an exception is swallowed
        raise_on: Exception types that are re-raised unchanged
        log_level: Log level (debug, info, warning, error)

    Example:
        @handle_errors("Failed to parse results", default_return=())
        def parse(markup: str) -> tuple[SearchItem, ...]:
            ...
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except raise_on:
                    raise
                except Exception as e:
                    _log(log_level, f"{error_message}: {e}")
                    return default_return

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except raise_on:
                raise
            except Exception as e:
                _log(log_level, f"{error_message}: {e}")
                return default_return

        return wrapper  # type: ignore[return-value]

    return decorator
