"""
Unit tests for environment configuration.
Run from backend: python -m pytest tests/test_config.py -v
"""
import logging

from gronnest import config

_VARS = (
    "KASSALAPP_API_KEY",
    "OPEN_FOOD_FACTS_ENABLED",
    "MATVARETABELLEN_ENABLED",
    "OFF_USER_AGENT",
    "EXTERNAL_API_TIMEOUT",
    "EXTERNAL_API_MAX_RETRIES",
    "SOURCE_CACHE_TTL_SECONDS",
    "SOURCE_CACHE_MAX_ENTRIES",
    "NUTRITION_CACHE_TTL_SECONDS",
)


def _clear_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


def test_paths_resolve_relative_to_backend():
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "gronnest").is_dir()
    assert config.get_env_path() == config._BACKEND_DIR / ".env"


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)
    assert config.get_kassalapp_api_key() == ""
    assert config.get_open_food_facts_enabled() is True
    assert config.get_matvaretabellen_enabled() is True
    assert config.get_http_timeout() == 10
    assert config.get_http_max_retries() == 2
    assert config.get_cache_ttl_seconds() == 1800
    assert config.get_cache_max_entries() == 100
    assert config.get_nutrition_cache_ttl_seconds() == 86400
    assert config.get_off_user_agent().startswith("Gronnest/")


def test_overrides(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("KASSALAPP_API_KEY", "  secret  ")
    monkeypatch.setenv("OPEN_FOOD_FACTS_ENABLED", "false")
    monkeypatch.setenv("SOURCE_CACHE_MAX_ENTRIES", "5")
    assert config.get_kassalapp_api_key() == "secret"
    assert config.get_open_food_facts_enabled() is False
    assert config.get_cache_max_entries() == 5


def test_invalid_and_out_of_range_integers(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("EXTERNAL_API_TIMEOUT", "soon")
    monkeypatch.setenv("EXTERNAL_API_MAX_RETRIES", "0")
    monkeypatch.setenv("SOURCE_CACHE_MAX_ENTRIES", "-3")
    assert config.get_http_timeout() == 10
    assert config.get_http_max_retries() == 1
    assert config.get_cache_max_entries() == 1


def test_log_config_hides_secret(monkeypatch, caplog):
    _clear_env(monkeypatch)
    monkeypatch.setenv("KASSALAPP_API_KEY", "secret-token")
    with caplog.at_level(logging.INFO, logger="gronnest.config"):
        config.log_config()
    assert "CONFIG" in caplog.text
    assert "kassalapp_key=True" in caplog.text
    assert "secret-token" not in caplog.text
