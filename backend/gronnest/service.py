"""
Entry points for the presentation layer: resolve(barcode), search(query, limit), score(product).
Wires the three sources, their caches, the Resolver and the Ranker from environment configuration.
"""
import logging
from typing import Callable, Optional

from dotenv import load_dotenv

from gronnest.cache import TTLCache
from gronnest.config import (
    get_cache_max_entries,
    get_cache_ttl_seconds,
    get_env_path,
    get_http_max_retries,
    get_http_timeout,
    get_kassalapp_api_key,
    get_matvaretabellen_enabled,
    get_nutrition_cache_ttl_seconds,
    get_off_user_agent,
    get_open_food_facts_enabled,
    log_config,
)
from gronnest.external_apis import KassalappSource, MatvaretabellenSource, OpenFoodFactsSource
from gronnest.models.product import CanonicalProduct, EnrichedProduct
from gronnest.models.score import ScoreResult
from gronnest.resolution import ProductResolver
from gronnest.scoring import score as score_product
from gronnest.search import RelevanceRanker

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, open_food_facts, kassalapp, matvaretabellen=None):
        self.open_food_facts = open_food_facts
        self.kassalapp = kassalapp
        self.matvaretabellen = matvaretabellen
        self.resolver = ProductResolver(open_food_facts, kassalapp, nutrition=matvaretabellen)
        self.ranker = RelevanceRanker(open_food_facts, kassalapp)

    @classmethod
    def from_env(cls, clock: Optional[Callable[[], float]] = None) -> "ProductService":
        """Load backend/.env, then build each source with its own bounded cache."""
        load_dotenv(get_env_path())
        log_config()
        timeout = get_http_timeout()
        retries = get_http_max_retries()
        max_entries = get_cache_max_entries()
        ttl = get_cache_ttl_seconds()
        off = OpenFoodFactsSource(
            cache=TTLCache(max_entries=max_entries, ttl_seconds=ttl, clock=clock, name="open_food_facts"),
            timeout=timeout,
            max_retries=retries,
            user_agent=get_off_user_agent(),
            enabled=get_open_food_facts_enabled(),
        )
        kassalapp = KassalappSource(
            api_key=get_kassalapp_api_key(),
            cache=TTLCache(max_entries=max_entries, ttl_seconds=ttl, clock=clock, name="kassalapp"),
            timeout=timeout,
            max_retries=retries,
        )
        matvaretabellen = MatvaretabellenSource(
            cache=TTLCache(
                max_entries=1,
                ttl_seconds=get_nutrition_cache_ttl_seconds(),
                clock=clock,
                name="matvaretabellen",
            ),
            timeout=timeout,
            max_retries=retries,
            enabled=get_matvaretabellen_enabled(),
        )
        return cls(off, kassalapp, matvaretabellen)

    async def resolve(self, barcode: str) -> Optional[EnrichedProduct]:
        return await self.resolver.resolve(barcode)

    async def search(self, query: str, limit: int = 15) -> list[CanonicalProduct]:
        return await self.ranker.search(query, limit)

    def score(self, product: CanonicalProduct) -> ScoreResult:
        result = score_product(product)
        logger.info(
            "SCORE barcode=%s total=%s grade=%s quality=%s",
            product.barcode, result.total, result.grade.value, result.data_quality,
        )
        return result

    def cache_stats(self) -> dict:
        """Entry counts and hit/miss totals per source cache."""
        stats = {}
        for source in (self.open_food_facts, self.kassalapp, self.matvaretabellen):
            cache = getattr(source, "cache", None)
            if isinstance(cache, TTLCache):
                s = cache.stats()
                stats[s["name"]] = s
        return stats
