"""
Unified free-text search: static grocery matches + Open Food Facts + Kassalapp,
de-duplicated and ordered so literal products beat flavour/variant mentions.
"""
import logging
import re
from typing import Iterable

from gronnest.models.product import CanonicalProduct
from gronnest.resolution.fanout import gather_settled, run_source
from gronnest.search.local_terms import LOCAL_TERMS, LocalTerm, is_local_product, match_local_terms

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2

EXACT_MATCH = 200
PREFIX_MATCH = 150
FIRST_WORD_MATCH = 140
WHOLE_WORD_MATCH = 100
FLAVOR_WORD_MATCH = 30
SUBSTRING_MATCH = 20
PRODUCE_BONUS = 50
PROCESSED_PENALTY = -10
LOCAL_TERM_BONUS = 100
NOVA_ADJUSTMENTS = {1: 30, 2: 15, 4: -20}

# Words that mark the query as a flavour or ingredient of some other product
FLAVOR_INDICATORS = (
    "with", "med", "&", "smoothie", "yogurt", "yoghurt", "juice", "drink",
    "smak", "flavor", "flavour", "saus", "sauce", "chips",
)
PRODUCE_CATEGORIES = (
    "fruit", "frukt", "vegetable", "grønnsak", "fresh", "fersk", "produce", "råvare", "bær", "berries",
)
PROCESSED_CATEGORIES = (
    "dairy", "meieri", "beverage", "drikke", "snack", "chips", "godteri", "candy",
)


def _words(text: str) -> list[str]:
    return re.findall(r"\w+", text.lower())


def _has_flavor_indicator(name: str) -> bool:
    words = set(_words(name))
    for indicator in FLAVOR_INDICATORS:
        if indicator == "&":
            if "&" in name:
                return True
        elif indicator in words or (len(indicator) > 4 and indicator in name):
            return True
    return False


def _name_score(name: str, query: str) -> int:
    if name == query:
        return EXACT_MATCH
    if name.startswith(query):
        return PREFIX_MATCH
    words = _words(name)
    if words and words[0] == query:
        return FIRST_WORD_MATCH
    if re.search(r"(?<!\w)" + re.escape(query) + r"(?!\w)", name):
        return FLAVOR_WORD_MATCH if _has_flavor_indicator(name) else WHOLE_WORD_MATCH
    if query in name:
        return SUBSTRING_MATCH
    return 0


def relevance_score(product: CanonicalProduct, query: str) -> int:
    q = query.strip().lower()
    name = product.name.strip().lower()
    category = product.category.lower()

    score = _name_score(name, q)
    if any(c in category for c in PRODUCE_CATEGORIES):
        score += PRODUCE_BONUS
    elif any(c in category for c in PROCESSED_CATEGORIES):
        score += PROCESSED_PENALTY
    score += NOVA_ADJUSTMENTS.get(product.nova_group, 0)
    if is_local_product(product):
        score += LOCAL_TERM_BONUS
    return score


def dedupe(products: Iterable[CanonicalProduct]) -> list[CanonicalProduct]:
    """First occurrence wins: by case-insensitive name, then by barcode."""
    seen_names: set[str] = set()
    seen_barcodes: set[str] = set()
    out: list[CanonicalProduct] = []
    for p in products:
        name_key = p.name.strip().lower()
        if name_key and name_key in seen_names:
            continue
        if p.barcode and p.barcode in seen_barcodes:
            continue
        if name_key:
            seen_names.add(name_key)
        if p.barcode:
            seen_barcodes.add(p.barcode)
        out.append(p)
    return out


def rank(candidates: list[CanonicalProduct], query: str, limit: int) -> list[CanonicalProduct]:
    """Stable sort by relevance (ties keep merge order), truncated to limit."""
    scored = [(relevance_score(p, query), p) for p in candidates]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [p for _, p in scored[:max(0, limit)]]


class RelevanceRanker:
    """search(query, limit) -> ordered CanonicalProducts. Holds no per-request state."""

    def __init__(self, open_food_facts, kassalapp, local_terms: tuple[LocalTerm, ...] = LOCAL_TERMS):
        self.open_food_facts = open_food_facts
        self.kassalapp = kassalapp
        self.local_terms = local_terms

    async def search(self, query: str, limit: int = 15) -> list[CanonicalProduct]:
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH or limit <= 0:
            return []

        local = match_local_terms(query, self.local_terms)
        off_res, kl_res = await gather_settled(
            run_source("open_food_facts", self.open_food_facts.search, query, limit),
            run_source("kassalapp", self.kassalapp.search, query, limit),
        )
        off_hits = list(off_res.payload) if off_res.found else []
        kl_hits = list(kl_res.payload) if kl_res.found else []

        merged = dedupe([*local, *off_hits, *kl_hits])
        results = rank(merged, query, limit)
        logger.info(
            "SEARCH query=%s local=%s off=%s(%s) kassalapp=%s(%s) results=%s",
            query[:60], len(local), len(off_hits), off_res.status,
            len(kl_hits), kl_res.status, len(results),
        )
        return results
