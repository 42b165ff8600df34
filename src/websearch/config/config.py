"""Pydantic Settings configuration management."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import BeforeValidator, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from websearch.exceptions import ConfigurationError
from websearch.models import MIN_CONTENT_LIMIT, ProviderDescriptor, WebSearchConfiguration

logger = logging.getLogger(__name__)


def _find_project_root() -> Path:
    """Find project root directory (contains pyproject.toml or .env).

    Priority check for PROJECT_ROOT environment variable for Docker scenarios.
    """
    env_root = os.environ.get("PROJECT_ROOT")
    if env_root:
        path = Path(env_root)
        if path.exists():
            return path.resolve()

    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists() or (parent / ".env").exists():
            return parent
    return current.parents[3]


_PROJECT_ROOT = _find_project_root()


def _parse_bool(value: str | bool | None) -> bool:
    """Parse boolean value from string or bool."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes")


# Type alias for boolean fields from environment variables
EnvBool = Annotated[bool, BeforeValidator(_parse_bool)]

# Shared model configuration
_COMMON_CONFIG = SettingsConfigDict(
    env_file=_PROJECT_ROOT / ".env",
    env_file_encoding="utf-8",
    extra="ignore",
    env_ignore_empty=True,
)

# Result page templates of the scrape-based backends
LOCAL_GOOGLE_URL = "https://www.google.com/search?q=%s"
LOCAL_BING_URL = "https://cn.bing.com/search?q=%s&ensearch=1"
LOCAL_BAIDU_URL = "https://www.baidu.com/s?wd=%s"

TAVILY_API_HOST = "https://api.tavily.com"
EXA_API_HOST = "https://api.exa.ai"


# ==========================================
# Nested configuration classes using BaseSettings
# ==========================================


class SearchConfig(BaseSettings):
    """Search behaviour configuration."""

    model_config = _COMMON_CONFIG

    default_provider: str = Field(default="local-bing", validation_alias="WEBSEARCH_DEFAULT_PROVIDER")
    max_results: int = Field(default=5, ge=1, le=100, validation_alias="WEBSEARCH_MAX_RESULTS")
    content_limit: int | None = Field(default=None, ge=MIN_CONTENT_LIMIT, validation_alias="WEBSEARCH_CONTENT_LIMIT")
    overwrite: EnvBool = Field(default=False, validation_alias="WEBSEARCH_OVERWRITE")
    search_with_time: EnvBool = Field(default=True, validation_alias="WEBSEARCH_WITH_TIME")


class ProviderConfig(BaseSettings):
    """Search backend credentials and endpoints."""

    model_config = _COMMON_CONFIG

    tavily_api_key: str = Field(default="", validation_alias="TAVILY_API_KEY")
    exa_api_key: str = Field(default="", validation_alias="EXA_API_KEY")

    # SearXNG configuration
    searxng_api_host: str = Field(default="", validation_alias="SEARXNG_API_HOST")
    searxng_username: str | None = Field(default=None, validation_alias="SEARXNG_USERNAME")
    searxng_password: str | None = Field(default=None, validation_alias="SEARXNG_PASSWORD")

    # Render result pages (and fetched pages) through the page renderer
    local_using_browser: EnvBool = Field(default=False, validation_alias="LOCAL_USING_BROWSER")


class FetchConfig(BaseSettings):
    """Content fetch configuration."""

    model_config = _COMMON_CONFIG

    fetch_timeout: float = Field(default=30.0, gt=0, le=300, validation_alias="FETCH_TIMEOUT")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = _COMMON_CONFIG

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: str = Field(default="./logs", validation_alias="LOG_DIR")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ConfigurationError(f"Log level must be one of {valid_levels}")
        return v.upper()


class SystemConfig(BaseSettings):
    """System configuration."""

    model_config = _COMMON_CONFIG

    debug: EnvBool = Field(default=False, validation_alias="DEBUG")


# ==========================================
# Main configuration class
# ==========================================


class Config(BaseSettings):
    """Main configuration class.

    Uses pydantic-settings to load configuration from environment variables
    and the project's .env file. Each nested configuration class loads its
    environment variables independently.
    """

    model_config = _COMMON_CONFIG

    search: SearchConfig = Field(default_factory=SearchConfig)
    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    def provider_descriptors(self) -> tuple[ProviderDescriptor, ...]:
        """Built-in backends, in display order."""
        p = self.providers
        return (
            ProviderDescriptor(id="tavily", name="Tavily", api_host=TAVILY_API_HOST, api_key=p.tavily_api_key),
            ProviderDescriptor(
                id="searxng",
                name="Searxng",
                api_host=p.searxng_api_host,
                basic_auth_username=p.searxng_username,
                basic_auth_password=p.searxng_password,
            ),
            ProviderDescriptor(id="exa", name="Exa", api_host=EXA_API_HOST, api_key=p.exa_api_key),
            ProviderDescriptor(
                id="local-google",
                name="Google",
                url=LOCAL_GOOGLE_URL,
                using_browser=p.local_using_browser,
                is_system=True,
            ),
            ProviderDescriptor(
                id="local-bing",
                name="Bing",
                url=LOCAL_BING_URL,
                using_browser=p.local_using_browser,
                is_system=True,
            ),
            ProviderDescriptor(
                id="local-baidu",
                name="Baidu",
                url=LOCAL_BAIDU_URL,
                using_browser=p.local_using_browser,
                is_system=True,
            ),
        )

    def to_configuration(self) -> WebSearchConfiguration:
        """Build the search configuration snapshot."""
        return WebSearchConfiguration(
            default_provider_id=self.search.default_provider,
            max_results=self.search.max_results,
            content_limit=self.search.content_limit,
            overwrite_enabled=self.search.overwrite,
            search_with_time=self.search.search_with_time,
            providers=self.provider_descriptors(),
        )

    def validate_config(self) -> list[str]:
        """Validate configuration completeness and return list of warnings."""
        warnings_list: list[str] = []

        known = {d.id for d in self.provider_descriptors()}
        if self.search.default_provider not in known:
            warnings_list.append(
                f"WEBSEARCH_DEFAULT_PROVIDER '{self.search.default_provider}' is unknown, "
                "the first configured provider will be used"
            )

        if not self.providers.tavily_api_key and not self.providers.exa_api_key and not self.providers.searxng_api_host:
            warnings_list.append("No search API configured, only local result page scraping is available")

        return warnings_list


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance.

    Loads configuration from environment variables and .env file.

    Returns:
        Config instance with all settings loaded.
    """
    return Config()


def get_config_safe() -> tuple[Config | None, list[str]]:
    """Safely load configuration.

    Returns:
        tuple: (Config object or None, list of error messages)
    """
    try:
        return Config(), []
    except ValidationError as e:
        return None, [f"Failed to load configuration: {e}"]
    except ConfigurationError as e:
        return None, [f"Invalid configuration: {e}"]
