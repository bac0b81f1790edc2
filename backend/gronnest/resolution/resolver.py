"""
Barcode resolution across all sources.
Open Food Facts is the base record when present; Kassalapp fills gaps (or becomes the base);
Matvaretabellen supplies a derived Nutri-Score only when none is known.
"""
import logging
from dataclasses import replace
from typing import Optional

from gronnest.external_apis.base import SourceResult
from gronnest.external_apis.kassalapp import kassalapp_to_canonical, lowest_price
from gronnest.external_apis.matvaretabellen import extract_standard_nutrients
from gronnest.models.product import (
    CanonicalProduct,
    DataSources,
    EnrichedProduct,
    NutriScore,
    is_blank,
)
from gronnest.resolution.fanout import gather_settled, run_source
from gronnest.resolution.merge import merge_products
from gronnest.scoring.health import nutrient_grade, nutrient_health_estimate

logger = logging.getLogger(__name__)

NUTRITION_QUERY_WORDS = 2


def nutrition_query(name: str) -> str:
    """First two words of the product name; empty for blank or placeholder names."""
    if is_blank(name):
        return ""
    return " ".join(name.split()[:NUTRITION_QUERY_WORDS])


class ProductResolver:
    """resolve(barcode) -> EnrichedProduct | None. Holds no per-request state."""

    def __init__(self, open_food_facts, kassalapp, nutrition=None):
        self.open_food_facts = open_food_facts
        self.kassalapp = kassalapp
        self.nutrition = nutrition

    async def resolve(self, barcode: str) -> Optional[EnrichedProduct]:
        barcode = (barcode or "").strip()
        if not barcode:
            return None

        off_res, kl_res = await gather_settled(
            run_source("open_food_facts", self.open_food_facts.fetch_by_barcode, barcode),
            run_source("kassalapp", self.kassalapp.fetch_by_barcode, barcode),
        )
        logger.info(
            "RESOLVER sources barcode=%s off=%s kassalapp=%s",
            barcode, off_res.status, kl_res.status,
        )

        off_product: Optional[CanonicalProduct] = off_res.payload if off_res.found else None
        kassalapp_raw: Optional[dict] = kl_res.payload if kl_res.found else None
        kassalapp_product = kassalapp_to_canonical(kassalapp_raw, barcode) if kassalapp_raw else None

        # Priority order for base selection and gap filling
        candidates = [p for p in (off_product, kassalapp_product) if p is not None]
        if not candidates:
            logger.info("RESOLVER not found barcode=%s", barcode)
            return None
        product = merge_products(candidates[0], *candidates[1:])

        nutrition_res: Optional[SourceResult] = None
        if not product.nutriscore.known:
            product, nutrition_res = await self._enrich_nutrition(product)

        sources = DataSources(
            open_food_facts=off_product is not None,
            kassalapp=kassalapp_raw is not None,
            matvaretabellen=nutrition_res is not None and nutrition_res.found,
        )
        enriched = EnrichedProduct(
            product=product,
            data_sources=sources,
            kassalapp_raw=kassalapp_raw,
            matvaretabellen_raw=nutrition_res.payload if sources.matvaretabellen else None,
            price_info=lowest_price(kassalapp_raw) if kassalapp_raw else None,
        )
        logger.info(
            "RESOLVER resolved barcode=%s name=%s bonus=%s nutriscore=%s",
            barcode, product.name[:80], sources.quality_bonus(), product.nutriscore.grade,
        )
        return enriched

    async def _enrich_nutrition(
        self, product: CanonicalProduct,
    ) -> tuple[CanonicalProduct, Optional[SourceResult]]:
        """Attach a derived Nutri-Score from reference nutrients. Caller guarantees the grade is unknown."""
        if self.nutrition is None:
            return product, None
        query = nutrition_query(product.name)
        if not query:
            return product, None
        res = await run_source("matvaretabellen", self.nutrition.find_by_name, query)
        if not res.found:
            return product, res
        nutrients = extract_standard_nutrients(res.payload)
        derived = NutriScore(
            grade=nutrient_grade(nutrients).value.lower(),
            score=nutrient_health_estimate(nutrients),
        )
        logger.info(
            "RESOLVER nutrition barcode=%s query=%s derived_grade=%s",
            product.barcode, query, derived.grade,
        )
        return replace(product, nutriscore=derived), res
