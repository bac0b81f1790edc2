"""
Fan-out/fan-in over blocking source adapters.
Each call runs on a worker thread with its own failure boundary; the join waits for every outcome.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from gronnest.external_apis.base import SourceResult, unavailable

logger = logging.getLogger(__name__)


async def run_source(source: str, fn: Callable[..., SourceResult], *args) -> SourceResult:
    """
    Run one adapter call off the event loop. Any exception becomes an 'unavailable' result.
    If the awaiting caller is cancelled the thread still finishes, so its result can land in the adapter cache.
    """
    try:
        result = await asyncio.to_thread(fn, *args)
    except Exception as e:
        logger.warning("FANOUT source=%s failed error=%s: %s", source, type(e).__name__, str(e)[:120])
        return unavailable(source, f"error:{type(e).__name__}")
    if not isinstance(result, SourceResult):
        logger.warning("FANOUT source=%s returned %s", source, type(result).__name__)
        return unavailable(source, "bad_result")
    return result


async def gather_settled(*calls: Awaitable[SourceResult]) -> list[SourceResult]:
    """Await all calls; results keep call order and never raise."""
    return list(await asyncio.gather(*calls))
