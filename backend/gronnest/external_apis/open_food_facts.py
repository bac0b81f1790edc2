"""
Open Food Facts connector (no key required).
Product: https://no.openfoodfacts.org/api/v2/product/<barcode>.json (then world.openfoodfacts.org)
Search:  https://no.openfoodfacts.org/cgi/search.pl?search_terms=...&json=1
"""
import logging
import re
from typing import Any, Optional

from gronnest.cache import MISSING, TTLCache
from gronnest.external_apis.base import SourceResult, not_found, unavailable
from gronnest.external_apis.http_retry import get_with_retries, read_json
from gronnest.models.product import (
    AllergenInfo,
    CanonicalProduct,
    EcoScore,
    NutriScore,
    Packaging,
    UNKNOWN_BRAND,
    UNKNOWN_CATEGORY,
    UNKNOWN_NAME,
    normalize_grade,
    normalize_nova,
)
from gronnest.scoring.classifiers import detect_packaging_materials

logger = logging.getLogger(__name__)

SOURCE = "open_food_facts"
OFF_PRODUCT_URLS = (
    "https://no.openfoodfacts.org/api/v2/product/{barcode}.json",
    "https://world.openfoodfacts.org/api/v2/product/{barcode}.json",
)
OFF_SEARCH_URL = "https://no.openfoodfacts.org/cgi/search.pl"


# ASCII spellings of Norwegian words seen in crowd-sourced names -> proper spelling
_NORWEGIAN_FIXES = {
    "youghurt": "yoghurt",
    "joghurt": "yoghurt",
    "yogourt": "yoghurt",
    "baer": "bær",
    "aerter": "ærter",
    "paere": "pære",
    "kjoett": "kjøtt",
    "broed": "brød",
    "smoer": "smør",
    "floete": "fløte",
    "roemme": "rømme",
    "noetter": "nøtter",
    "roedbet": "rødbete",
    "groennsaker": "grønnsaker",
    "groenn": "grønn",
    "groent": "grønt",
    "oekologisk": "økologisk",
    "paalegg": "pålegg",
    "blaabaer": "blåbær",
    "blaaber": "blåbær",
    "jordbaer": "jordbær",
    "bringebaer": "bringebær",
    "tranebaer": "tranebær",
    "multebaer": "multebær",
    "tyttbaer": "tyttebær",
    "skogsbaer": "skogsbær",
    "stikkelbaer": "stikkelsbær",
    "solbaer": "solbær",
    # Short words only as whole words
    "oel": "øl",
    "raa": "rå",
    "roem": "røm",
}
_WHOLE_WORD_FIXES = frozenset({"oel", "raa", "roem"})

# Longest first so "blaabaer" wins over "baer"
_FIX_PATTERNS = [
    (
        re.compile(
            (r"\b%s\b" if ascii_word in _WHOLE_WORD_FIXES else "%s") % re.escape(ascii_word),
            re.IGNORECASE,
        ),
        norwegian,
    )
    for ascii_word, norwegian in sorted(_NORWEGIAN_FIXES.items(), key=lambda kv: -len(kv[0]))
]


def fix_norwegian_text(text: str) -> str:
    """Replace ASCII transliterations with Norwegian spelling, keeping a leading capital."""
    if not text:
        return text

    for pattern, norwegian in _FIX_PATTERNS:
        def _sub(m, norwegian=norwegian):
            if m.group(0)[0].isupper():
                return norwegian[0].upper() + norwegian[1:]
            return norwegian
        text = pattern.sub(_sub, text)
    return text


_ALLERGEN_NAMES = {
    "en:gluten": "Gluten",
    "en:milk": "Melk",
    "en:eggs": "Egg",
    "en:nuts": "Nøtter",
    "en:peanuts": "Peanøtter",
    "en:soybeans": "Soya",
    "en:celery": "Selleri",
    "en:mustard": "Sennep",
    "en:sesame-seeds": "Sesamfrø",
    "en:sulphur-dioxide-and-sulphites": "Sulfitt",
    "en:lupin": "Lupin",
    "en:molluscs": "Bløtdyr",
    "en:crustaceans": "Skalldyr",
    "en:fish": "Fisk",
    "en:wheat": "Hvete",
    "en:barley": "Bygg",
    "en:oats": "Havre",
    "en:rye": "Rug",
    "en:almonds": "Mandler",
    "en:hazelnuts": "Hasselnøtter",
    "en:walnuts": "Valnøtter",
    "en:cashews": "Cashewnøtter",
}

# Structured label tags that name a certification we score
_LABEL_TAG_NAMES = {
    "en:organic": "Økologisk",
    "en:eu-organic": "EU Organic",
    "en:norwegian-certified-organic": "Debio",
    "en:debio": "Debio",
    "en:fair-trade": "Fairtrade",
    "en:fairtrade-international": "Fairtrade",
    "en:rainforest-alliance": "Rainforest Alliance",
    "en:msc": "MSC",
    "en:sustainable-seafood-msc": "MSC",
    "en:asc": "ASC",
    "en:nordic-swan": "Svanemerket",
    "en:produced-in-norway": "Nyt Norge",
    "no:nyt-norge": "Nyt Norge",
}

# Used only for search hits, which often lack origin fields
NORWEGIAN_BRANDS = (
    "tine", "gilde", "prior", "norvegia", "jarlsberg", "synnøve", "mills",
    "stabburet", "idun", "lerøy", "maarud", "sørlandschips", "aass", "ringnes",
    "hansa", "freia", "nidar", "diplom-is", "kavli", "bama",
)


def _text(product: dict, key: str) -> str:
    value = product.get(key)
    return value.strip() if isinstance(value, str) else ""


def _tags(product: dict, key: str) -> list[str]:
    value = product.get(key)
    if not isinstance(value, list):
        return []
    return [t.lower() for t in value if isinstance(t, str)]


def _clean_tag(tag: str) -> str:
    """'en:sesame-seeds' -> 'Sesame Seeds'."""
    cleaned = re.sub(r"^[a-z]{2}:", "", tag).replace("-", " ").strip()
    return cleaned.title()


def parse_allergen_tags(tags: list[str]) -> tuple[str, ...]:
    names: list[str] = []
    for tag in tags:
        name = _ALLERGEN_NAMES.get(tag) or _clean_tag(tag)
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _mentions_norway(text: str) -> bool:
    t = text.lower()
    return "norway" in t or "norge" in t


def is_norwegian_product(product: dict, use_brands: bool = False) -> bool:
    if "en:norway" in _tags(product, "countries_tags"):
        return True
    if any(_mentions_norway(t) for t in _tags(product, "origins_tags")):
        return True
    if any(_mentions_norway(t) for t in _tags(product, "manufacturing_places_tags")):
        return True
    if _mentions_norway(_text(product, "origins")) or _mentions_norway(_text(product, "manufacturing_places")):
        return True
    labels = _text(product, "labels").lower()
    if "nyt norge" in labels or "nyt-norge" in labels:
        return True
    if "en:produced-in-norway" in _tags(product, "labels_tags"):
        return True
    if use_brands:
        brand = _text(product, "brands").lower()
        return any(b in brand for b in NORWEGIAN_BRANDS)
    return False


def _best_origin(product: dict, is_norwegian: bool) -> str:
    candidates = [
        _text(product, "origins"),
        _text(product, "manufacturing_places"),
        *[_clean_tag(t) for t in _tags(product, "origins_tags")],
        *[_clean_tag(t) for t in _tags(product, "manufacturing_places_tags")],
    ]
    for c in candidates:
        if c:
            return c
    return "Norge" if is_norwegian else ""


def _labels(product: dict) -> tuple[str, ...]:
    out: list[str] = []
    seen: set[str] = set()
    free_text = [l.strip() for l in _text(product, "labels").split(",")]
    from_tags = [_LABEL_TAG_NAMES[t] for t in _tags(product, "labels_tags") if t in _LABEL_TAG_NAMES]
    for label in free_text + from_tags:
        if label and label.lower() not in seen:
            seen.add(label.lower())
            out.append(label)
    return tuple(out)


def _packaging(product: dict) -> Packaging:
    text = _text(product, "packaging")
    tag_text = " ".join(
        _tags(product, "packaging_tags") + _tags(product, "packaging_materials_tags")
    )
    materials = detect_packaging_materials(f"{text} {tag_text}")
    return Packaging(text=text, materials=tuple(m.value for m in materials))


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    return 0


def off_product_to_canonical(product: Any, barcode: str = "", search_hit: bool = False) -> CanonicalProduct:
    """
    Map one OFF product to CanonicalProduct. Missing or malformed fields fall back to defaults.
    Search hits use empty brand/category instead of placeholders and also trust known Norwegian brands.
    """
    if not isinstance(product, dict):
        product = {}
    is_norwegian = is_norwegian_product(product, use_brands=search_hit)

    name = _text(product, "product_name") or _text(product, "product_name_no")
    brand = _text(product, "brands")
    category = _text(product, "categories").split(",")[0].strip()
    if search_hit:
        image_url = _text(product, "image_small_url") or _text(product, "image_url")
    else:
        image_url = _text(product, "image_url") or _text(product, "image_small_url")

    ecoscore_data = product.get("ecoscore_data")
    has_detailed = isinstance(ecoscore_data, dict) and bool(ecoscore_data.get("adjustments"))

    return CanonicalProduct(
        barcode=_text(product, "code") or str(barcode),
        name=fix_norwegian_text(name) or UNKNOWN_NAME,
        brand=fix_norwegian_text(brand) or ("" if search_hit else UNKNOWN_BRAND),
        image_url=image_url,
        category=category or ("" if search_hit else UNKNOWN_CATEGORY),
        origin=_best_origin(product, is_norwegian),
        is_norwegian=is_norwegian,
        packaging=_packaging(product),
        labels=_labels(product),
        ecoscore=EcoScore(
            grade=normalize_grade(product.get("ecoscore_grade")),
            score=_number(product.get("ecoscore_score")),
            has_detailed_data=has_detailed,
        ),
        nutriscore=NutriScore(
            grade=normalize_grade(product.get("nutriscore_grade")),
            score=_number(product.get("nutriscore_score")),
        ),
        nova_group=normalize_nova(product.get("nova_group")),
        ingredients=_text(product, "ingredients_text"),
        allergen_info=AllergenInfo(
            allergens=parse_allergen_tags(_tags(product, "allergens_tags")),
            traces=parse_allergen_tags(_tags(product, "traces_tags")),
        ),
    )


class OpenFoodFactsSource:
    """Adapter A: richest schema, base record when present. Owns its timeout and cache."""

    name = SOURCE

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        timeout: int = 10,
        max_retries: int = 2,
        user_agent: str = "Gronnest/1.0 (contact@gronnest.no)",
        enabled: bool = True,
    ):
        self.cache = cache if cache is not None else TTLCache(name=SOURCE)
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent
        self.enabled = enabled

    def _get(self, url: str, params: Optional[dict] = None):
        return get_with_retries(
            url,
            params=params,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

    def fetch_by_barcode(self, barcode: str) -> SourceResult:
        if not self.enabled:
            return unavailable(SOURCE, "disabled")
        barcode = (barcode or "").strip()
        if not barcode:
            return not_found(SOURCE, "empty_barcode")

        cache_key = ("barcode", barcode)
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            if cached is None:
                return not_found(SOURCE, "cached_not_found")
            return SourceResult(cached, "found", SOURCE, "cache_hit")

        last_error: Optional[str] = None
        for url_template in OFF_PRODUCT_URLS:
            url = url_template.format(barcode=barcode)
            resp, err = self._get(url)
            if err is not None:
                last_error = err
                logger.warning("OPEN_FOOD_FACTS fetch failed barcode=%s url=%s error=%s", barcode, url[:60], err)
                continue
            if resp.status_code == 404:
                continue
            if resp.status_code >= 400:
                last_error = f"HTTP {resp.status_code}"
                logger.warning("OPEN_FOOD_FACTS bad status barcode=%s status=%s", barcode, resp.status_code)
                continue
            data, err = read_json(resp)
            if err is not None:
                last_error = err
                logger.warning("OPEN_FOOD_FACTS response error barcode=%s error=%s", barcode, err)
                continue
            if isinstance(data, dict) and data.get("status") == 1 and isinstance(data.get("product"), dict):
                product = off_product_to_canonical(data["product"], barcode)
                self.cache.set(cache_key, product)
                logger.info("OPEN_FOOD_FACTS found barcode=%s name=%s", barcode, product.name[:80])
                return SourceResult(product, "found", SOURCE, f"product_name={product.name[:80]}")

        if last_error is not None:
            return unavailable(SOURCE, f"error:{last_error[:80]}")
        self.cache.set(cache_key, None)
        logger.info("OPEN_FOOD_FACTS not found barcode=%s", barcode)
        return not_found(SOURCE)

    def search(self, query: str, limit: int = 10) -> SourceResult:
        """Free-text search; payload is a list of CanonicalProduct (possibly empty)."""
        if not self.enabled:
            return unavailable(SOURCE, "disabled")
        query = (query or "").strip()[:200]
        if len(query) < 2:
            return SourceResult([], "not_found", SOURCE, "short_query")

        cache_key = ("search", query.lower(), limit)
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return SourceResult(list(cached), "found" if cached else "not_found", SOURCE, "cache_hit")

        params = {
            "search_terms": query,
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": limit,
            "sort_by": "unique_scans_n",
        }
        resp, err = self._get(OFF_SEARCH_URL, params=params)
        if err is not None:
            logger.warning("OPEN_FOOD_FACTS search failed query=%s error=%s", query, err)
            return unavailable(SOURCE, f"error:{err[:80]}")
        if resp.status_code >= 400:
            logger.warning("OPEN_FOOD_FACTS search bad status query=%s status=%s", query, resp.status_code)
            return unavailable(SOURCE, f"error:HTTP {resp.status_code}")
        data, err = read_json(resp)
        if err is not None:
            logger.warning("OPEN_FOOD_FACTS search response error query=%s error=%s", query, err)
            return unavailable(SOURCE, err)

        raw_products = data.get("products") if isinstance(data, dict) else None
        results = [
            off_product_to_canonical(p, search_hit=True)
            for p in (raw_products or [])
            if isinstance(p, dict) and _text(p, "product_name")
        ][:limit]
        self.cache.set(cache_key, tuple(results))
        logger.info("OPEN_FOOD_FACTS search query=%s results=%s", query, len(results))
        return SourceResult(results, "found" if results else "not_found", SOURCE, f"results={len(results)}")
