"""
Kassalapp connector: Norwegian grocery products with store prices.
API docs: https://kassal.app/docs/api (bearer token required)
Product: GET https://kassal.app/api/v1/products/ean/<ean>
Search:  GET https://kassal.app/api/v1/products?search=...&size=N
"""
import logging
from typing import Any, Optional

from gronnest.cache import MISSING, TTLCache
from gronnest.external_apis.base import SourceResult, not_found, unavailable
from gronnest.external_apis.http_retry import get_with_retries, read_json
from gronnest.models.product import (
    AllergenInfo,
    CanonicalProduct,
    Packaging,
    PriceInfo,
    UNKNOWN_CATEGORY,
    UNKNOWN_NAME,
)
from gronnest.scoring.classifiers import contains_keyword

logger = logging.getLogger(__name__)

SOURCE = "kassalapp"
KASSALAPP_BASE_URL = "https://kassal.app/api/v1"

NORWEGIAN_INDICATORS = (
    "norge", "norway", "norsk", "nyt norge",
    "tine", "gilde", "prior", "stabburet", "mills", "freia", "nidar",
)

# Kassalapp has no packaging field; infer from name + description. First hit wins.
_PACKAGING_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("pet", ("plastflaske",)),
    ("glass", ("glass", "flaske")),
    ("metal", ("boks", "bokser", "hermetikk")),
    ("cardboard", ("kartong", "papir")),
    ("pet", ("pet",)),
    ("plastic", ("plast", "pose")),
)


def _text(d: dict, key: str) -> str:
    value = d.get(key)
    return value.strip() if isinstance(value, str) else ""


def is_norwegian_from_kassalapp(product: dict) -> bool:
    search_text = " ".join(
        t for t in (
            _text(product, "brand"),
            _text(product, "vendor"),
            _text(product, "description"),
            _text(product, "name"),
        ) if t
    ).lower()
    return any(indicator in search_text for indicator in NORWEGIAN_INDICATORS)


def extract_packaging(product: dict) -> str:
    """Best-guess packaging material tag, or 'unknown'."""
    text = f"{_text(product, 'name')} {_text(product, 'description')}"
    for material, keywords in _PACKAGING_RULES:
        if any(contains_keyword(text, kw) for kw in keywords):
            return material
    return "unknown"


def split_allergens(product: dict) -> AllergenInfo:
    """Entries with contains=YES are confirmed, MAY_CONTAIN are traces, NO is ignored."""
    confirmed: list[str] = []
    traces: list[str] = []
    entries = product.get("allergens")
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        name = _text(entry, "display_name") or _text(entry, "code")
        contains = _text(entry, "contains").upper()
        if not name:
            continue
        if contains == "YES" and name not in confirmed:
            confirmed.append(name)
        elif contains == "MAY_CONTAIN" and name not in traces:
            traces.append(name)
    return AllergenInfo(allergens=tuple(confirmed), traces=tuple(traces))


def _first_category(product: dict) -> str:
    categories = product.get("category")
    if isinstance(categories, list) and categories and isinstance(categories[0], dict):
        return _text(categories[0], "name")
    return ""


def kassalapp_to_canonical(product: Any, barcode: str = "") -> CanonicalProduct:
    """Translate a Kassalapp product into CanonicalProduct; unknown fields keep their defaults."""
    if not isinstance(product, dict):
        product = {}
    is_norwegian = is_norwegian_from_kassalapp(product)
    material = extract_packaging(product)
    return CanonicalProduct(
        barcode=_text(product, "ean") or str(barcode),
        name=_text(product, "name") or UNKNOWN_NAME,
        brand=_text(product, "brand") or _text(product, "vendor"),
        image_url=_text(product, "image"),
        category=_first_category(product) or UNKNOWN_CATEGORY,
        origin="Norge" if is_norwegian else "",
        is_norwegian=is_norwegian,
        packaging=Packaging(
            text="",
            materials=(material,) if material != "unknown" else (),
        ),
        ingredients=_text(product, "ingredients"),
        allergen_info=split_allergens(product),
    )


def lowest_price(product: Any) -> Optional[PriceInfo]:
    """Cheapest current store price in NOK, or None when no store has a numeric price."""
    if not isinstance(product, dict):
        return None
    best: Optional[PriceInfo] = None
    store_prices = product.get("store_prices")
    for entry in store_prices if isinstance(store_prices, list) else []:
        if not isinstance(entry, dict):
            continue
        price = entry.get("price") if isinstance(entry.get("price"), dict) else {}
        current = price.get("current")
        if isinstance(current, bool) or not isinstance(current, (int, float)):
            continue
        store = entry.get("store") if isinstance(entry.get("store"), dict) else {}
        if best is None or current < best.lowest_price:
            best = PriceInfo(lowest_price=current, store=_text(store, "name"))
    return best


class KassalappSource:
    """Adapter B: enrichment/fallback and pricing. fetch_by_barcode returns the provider-native dict."""

    name = SOURCE

    def __init__(
        self,
        api_key: str = "",
        cache: Optional[TTLCache] = None,
        timeout: int = 10,
        max_retries: int = 2,
    ):
        self.api_key = (api_key or "").strip()
        self.cache = cache if cache is not None else TTLCache(name=SOURCE)
        self.timeout = timeout
        self.max_retries = max_retries

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def fetch_by_barcode(self, ean: str) -> SourceResult:
        if not self.api_key:
            return unavailable(SOURCE, "no_api_key")
        ean = (ean or "").strip()
        if not ean:
            return not_found(SOURCE, "empty_barcode")

        cache_key = ("ean", ean)
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            if cached is None:
                return not_found(SOURCE, "cached_not_found")
            return SourceResult(cached, "found", SOURCE, "cache_hit")

        url = f"{KASSALAPP_BASE_URL}/products/ean/{ean}"
        resp, err = get_with_retries(
            url, headers=self._headers(), timeout=self.timeout, max_retries=self.max_retries,
        )
        if err is not None:
            logger.warning("KASSALAPP fetch failed ean=%s error=%s", ean, err)
            return unavailable(SOURCE, f"error:{err[:80]}")
        if resp.status_code == 404:
            self.cache.set(cache_key, None)
            logger.info("KASSALAPP not found ean=%s", ean)
            return not_found(SOURCE)
        if resp.status_code >= 400:
            logger.warning("KASSALAPP bad status ean=%s status=%s", ean, resp.status_code)
            return unavailable(SOURCE, f"error:HTTP {resp.status_code}")
        data, err = read_json(resp)
        if err is not None:
            logger.warning("KASSALAPP response error ean=%s error=%s", ean, err)
            return unavailable(SOURCE, err)

        product = data.get("data") if isinstance(data, dict) else None
        if not isinstance(product, dict) or not product:
            self.cache.set(cache_key, None)
            logger.info("KASSALAPP empty payload ean=%s", ean)
            return not_found(SOURCE, "empty_payload")
        self.cache.set(cache_key, product)
        logger.info("KASSALAPP found ean=%s name=%s", ean, _text(product, "name")[:80])
        return SourceResult(product, "found", SOURCE, f"name={_text(product, 'name')[:80]}")

    def search(self, query: str, limit: int = 10) -> SourceResult:
        """Free-text search; payload is a list of CanonicalProduct (possibly empty)."""
        if not self.api_key:
            return unavailable(SOURCE, "no_api_key")
        query = (query or "").strip()[:200]
        if len(query) < 2:
            return SourceResult([], "not_found", SOURCE, "short_query")

        cache_key = ("search", query.lower(), limit)
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return SourceResult(list(cached), "found" if cached else "not_found", SOURCE, "cache_hit")

        resp, err = get_with_retries(
            f"{KASSALAPP_BASE_URL}/products",
            params={"search": query, "size": limit},
            headers=self._headers(),
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
        if err is not None:
            logger.warning("KASSALAPP search failed query=%s error=%s", query, err)
            return unavailable(SOURCE, f"error:{err[:80]}")
        if resp.status_code >= 400:
            logger.warning("KASSALAPP search bad status query=%s status=%s", query, resp.status_code)
            return unavailable(SOURCE, f"error:HTTP {resp.status_code}")
        data, err = read_json(resp)
        if err is not None:
            logger.warning("KASSALAPP search response error query=%s error=%s", query, err)
            return unavailable(SOURCE, err)

        raw_products = data.get("data") if isinstance(data, dict) else None
        results = [
            kassalapp_to_canonical(p)
            for p in (raw_products if isinstance(raw_products, list) else [])
            if isinstance(p, dict) and _text(p, "name")
        ][:limit]
        self.cache.set(cache_key, tuple(results))
        logger.info("KASSALAPP search query=%s results=%s", query, len(results))
        return SourceResult(results, "found" if results else "not_found", SOURCE, f"results={len(results)}")
