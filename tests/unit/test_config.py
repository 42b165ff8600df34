"""Tests for configuration loading and the configuration store."""

import pytest

from websearch.config import Config, ConfigStore, get_config_safe
from websearch.models import ProviderDescriptor, WebSearchConfiguration

ENV_VARS = (
    "WEBSEARCH_DEFAULT_PROVIDER",
    "WEBSEARCH_MAX_RESULTS",
    "WEBSEARCH_CONTENT_LIMIT",
    "WEBSEARCH_OVERWRITE",
    "WEBSEARCH_WITH_TIME",
    "TAVILY_API_KEY",
    "EXA_API_KEY",
    "SEARXNG_API_HOST",
    "SEARXNG_USERNAME",
    "SEARXNG_PASSWORD",
    "LOCAL_USING_BROWSER",
    "FETCH_TIMEOUT",
    "LOG_LEVEL",
    "LOG_DIR",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()

    assert config.search.default_provider == "local-bing"
    assert config.search.max_results == 5
    assert config.search.content_limit is None
    assert config.search.search_with_time is True
    assert config.fetch.fetch_timeout == 30.0
    assert config.logging.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WEBSEARCH_DEFAULT_PROVIDER", "tavily")
    monkeypatch.setenv("WEBSEARCH_MAX_RESULTS", "8")
    monkeypatch.setenv("WEBSEARCH_CONTENT_LIMIT", "2000")
    monkeypatch.setenv("WEBSEARCH_WITH_TIME", "false")
    monkeypatch.setenv("WEBSEARCH_OVERWRITE", "yes")
    monkeypatch.setenv("TAVILY_API_KEY", "tvly-key")
    monkeypatch.setenv("LOCAL_USING_BROWSER", "1")

    configuration = Config().to_configuration()

    assert configuration.default_provider_id == "tavily"
    assert configuration.max_results == 8
    assert configuration.content_limit == 2000
    assert configuration.search_with_time is False
    assert configuration.overwrite_enabled is True
    assert configuration.default_provider.api_key == "tvly-key"
    assert configuration.find_provider("local-google").using_browser is True


def test_empty_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("WEBSEARCH_MAX_RESULTS", "")
    assert Config().search.max_results == 5


def test_provider_descriptors():
    """Test built-in providers and their endpoints."""
    descriptors = {d.id: d for d in Config().provider_descriptors()}

    assert list(descriptors) == ["tavily", "searxng", "exa", "local-google", "local-bing", "local-baidu"]
    assert descriptors["local-google"].url == "https://www.google.com/search?q=%s"
    assert descriptors["local-bing"].url == "https://cn.bing.com/search?q=%s&ensearch=1"
    assert descriptors["local-baidu"].url == "https://www.baidu.com/s?wd=%s"
    assert all(descriptors[i].is_system for i in ("local-google", "local-bing", "local-baidu"))
    assert descriptors["searxng"].api_key is None


def test_validate_config_warnings(monkeypatch):
    monkeypatch.setenv("WEBSEARCH_DEFAULT_PROVIDER", "bocha")

    warnings = Config().validate_config()

    assert any("bocha" in w for w in warnings)
    assert any("No search API configured" in w for w in warnings)


def test_validate_config_clean(monkeypatch):
    monkeypatch.setenv("SEARXNG_API_HOST", "https://searx.local")
    assert Config().validate_config() == []


def test_get_config_safe_out_of_range(monkeypatch):
    monkeypatch.setenv("WEBSEARCH_MAX_RESULTS", "0")

    config, errors = get_config_safe()

    assert config is None
    assert errors and errors[0].startswith("Failed to load configuration")


@pytest.mark.parametrize("limit", ["1", "3"])
def test_content_limit_must_fit_marker(monkeypatch, limit):
    """Test limits too small to hold the truncation marker are rejected."""
    monkeypatch.setenv("WEBSEARCH_CONTENT_LIMIT", limit)

    config, errors = get_config_safe()

    assert config is None
    assert "greater than or equal to 4" in errors[0]


def test_content_limit_smallest_accepted(monkeypatch):
    monkeypatch.setenv("WEBSEARCH_CONTENT_LIMIT", "4")

    config, errors = get_config_safe()

    assert errors == []
    assert config.to_configuration().content_limit == 4


def test_get_config_safe_bad_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    config, errors = get_config_safe()

    assert config is None
    assert "Log level must be one of" in errors[0]


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Config().logging.log_level == "DEBUG"


# ==========================================
# ConfigStore
# ==========================================


@pytest.fixture
def store():
    return ConfigStore(
        WebSearchConfiguration(
            default_provider_id="local-bing",
            providers=(ProviderDescriptor(id="local-bing"), ProviderDescriptor(id="exa")),
        )
    )


def test_snapshot_is_immutable_view(store):
    before = store.snapshot()
    store.set_default_provider("exa")

    assert before.default_provider_id == "local-bing"
    assert store.snapshot().default_provider_id == "exa"


def test_compare_and_set_default(store):
    assert store.compare_and_set_default("local-bing", "exa") is True
    assert store.snapshot().default_provider_id == "exa"

    assert store.compare_and_set_default("local-bing", "local-bing") is False
    assert store.snapshot().default_provider_id == "exa"


def test_replace(store):
    store.replace(WebSearchConfiguration(max_results=9))
    assert store.snapshot().max_results == 9
