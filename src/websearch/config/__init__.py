"""Configuration management module."""

from websearch.config.config import (
    Config,
    FetchConfig,
    LoggingConfig,
    ProviderConfig,
    SearchConfig,
    SystemConfig,
    get_config,
    get_config_safe,
)
from websearch.config.storage import ConfigStore

__all__ = [
    # Main config
    "Config",
    "get_config",
    "get_config_safe",
    # Process-wide store
    "ConfigStore",
    # Nested configs
    "SearchConfig",
    "ProviderConfig",
    "FetchConfig",
    "LoggingConfig",
    "SystemConfig",
]
