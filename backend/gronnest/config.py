"""
Environment-driven configuration for the product sources and caches.
All resolution relative to the backend directory.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# backend/gronnest/config.py -> parent=gronnest, parent.parent=backend
_BACKEND_DIR = Path(__file__).resolve().parent.parent

_TRUTHY = ("1", "true", "yes")


def get_env_path() -> Path:
    return _BACKEND_DIR / ".env"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("CONFIG invalid integer %s=%r, using %s", name, raw, default)
        return default


# --- External sources (lazy read from env) ---
def get_kassalapp_api_key() -> str:
    return os.environ.get("KASSALAPP_API_KEY", "").strip()


def get_open_food_facts_enabled() -> bool:
    return os.environ.get("OPEN_FOOD_FACTS_ENABLED", "true").lower() in _TRUTHY


def get_matvaretabellen_enabled() -> bool:
    return os.environ.get("MATVARETABELLEN_ENABLED", "true").lower() in _TRUTHY


def get_off_user_agent() -> str:
    return os.environ.get("OFF_USER_AGENT", "Gronnest/1.0 (contact@gronnest.no)")


def get_http_timeout() -> int:
    return _int_env("EXTERNAL_API_TIMEOUT", 10)


def get_http_max_retries() -> int:
    return max(1, _int_env("EXTERNAL_API_MAX_RETRIES", 2))


# --- Caches ---
def get_cache_ttl_seconds() -> int:
    return _int_env("SOURCE_CACHE_TTL_SECONDS", 30 * 60)


def get_cache_max_entries() -> int:
    return max(1, _int_env("SOURCE_CACHE_MAX_ENTRIES", 100))


def get_nutrition_cache_ttl_seconds() -> int:
    # Matvaretabellen is republished roughly once a year
    return _int_env("NUTRITION_CACHE_TTL_SECONDS", 24 * 60 * 60)


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: kassalapp_key=%s off_enabled=%s matvaretabellen_enabled=%s "
        "timeout=%ds retries=%s cache_ttl=%ds cache_max=%s nutrition_ttl=%ds",
        bool(get_kassalapp_api_key()), get_open_food_facts_enabled(),
        get_matvaretabellen_enabled(), get_http_timeout(), get_http_max_retries(),
        get_cache_ttl_seconds(), get_cache_max_entries(),
        get_nutrition_cache_ttl_seconds(),
    )
