"""Configuration store module."""

import logging
import threading

from websearch.models import WebSearchConfiguration

logger = logging.getLogger(__name__)


class ConfigStore:
    """Process-wide holder of the current search configuration.

    Readers take an immutable snapshot per invocation. The only mutation is
    changing the default provider, done under a lock so concurrent fallbacks
    resolve to a single committed value.
    """

    def __init__(self, configuration: WebSearchConfiguration) -> None:
        self._configuration = configuration
        self._lock = threading.Lock()

    def snapshot(self) -> WebSearchConfiguration:
        """Latest committed configuration."""
        with self._lock:
            return self._configuration

    def replace(self, configuration: WebSearchConfiguration) -> None:
        """Swap in a whole new configuration (e.g. after settings reload)."""
        with self._lock:
            self._configuration = configuration

    def set_default_provider(self, provider_id: str) -> None:
        """Persist ``provider_id`` as the default provider."""
        with self._lock:
            if self._configuration.default_provider_id != provider_id:
                self._configuration = self._configuration.with_default_provider(provider_id)
                logger.info(f"Default search provider set to '{provider_id}'")

    def compare_and_set_default(self, expected: str, provider_id: str) -> bool:
        """
        Set the default provider only if it still equals ``expected``.

        Returns:
            Whether the update was applied.
        """
        with self._lock:
            if self._configuration.default_provider_id != expected:
                return False
            self._configuration = self._configuration.with_default_provider(provider_id)
            logger.info(f"Default search provider changed from '{expected}' to '{provider_id}'")
            return True
