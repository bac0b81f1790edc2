"""
HTTP GET with retries and exponential backoff for external product sources.
"""
import logging
import time
from typing import Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2
DEFAULT_INITIAL_BACKOFF = 0.5
# Upstream statuses worth another attempt; anything else is returned to the caller as-is
RETRY_STATUSES = frozenset({429, 502, 503, 504})


def get_with_retries(
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: int = 10,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
) -> Tuple[Optional[requests.Response], Optional[str]]:
    """
    GET with retries on timeout, connection errors and transient upstream statuses.
    Returns (response, None) when a response was received (any status),
    (None, error_message) when every attempt failed.
    """
    params = params or {}
    headers = headers or {}
    last_error: Optional[str] = None
    max_retries = max(1, max_retries)
    for attempt in range(max_retries):
        try:
            resp = requests.get(url, params=params, headers=headers, timeout=timeout)
            status = getattr(resp, "status_code", 200)
            if status not in RETRY_STATUSES or attempt == max_retries - 1:
                return (resp, None)
            last_error = f"HTTP {status}"
            logger.warning(
                "EXTERNAL_API retry attempt=%s/%s url=%s status=%s",
                attempt + 1, max_retries, url[:60], status,
            )
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
            logger.warning(
                "EXTERNAL_API retry attempt=%s/%s url=%s error=%s",
                attempt + 1, max_retries, url[:60], last_error,
            )
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
            logger.warning(
                "EXTERNAL_API retry attempt=%s/%s url=%s error=%s",
                attempt + 1, max_retries, url[:60], last_error,
            )
        if attempt < max_retries - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("EXTERNAL_API backoff %.1fs before retry", delay)
            time.sleep(delay)
    return (None, last_error)


def read_json(resp: requests.Response) -> Tuple[Optional[object], Optional[str]]:
    """Decode a JSON body. Returns (data, None) or (None, error_message)."""
    try:
        return (resp.json(), None)
    except (requests.RequestException, ValueError) as e:
        return (None, f"invalid_json:{type(e).__name__}")
