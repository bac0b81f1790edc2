"""
Matvaretabellen connector: the Norwegian food composition table (Mattilsynet).
API docs: https://www.matvaretabellen.no/api/
The complete food list is downloaded once and cached; lookups are fuzzy by name.
"""
import logging
import math
import re
from typing import Any, Optional

from gronnest.cache import MISSING, TTLCache
from gronnest.external_apis.base import SourceResult, not_found, unavailable
from gronnest.external_apis.http_retry import get_with_retries, read_json
from gronnest.models.nutrition import StandardNutrients

logger = logging.getLogger(__name__)

SOURCE = "matvaretabellen"
MATVARETABELLEN_FOODS_URL = "https://www.matvaretabellen.no/api/nb/foods.json"
_FOODS_KEY = "foods"


def _food_name(food: dict) -> str:
    name = food.get("foodName")
    return name.strip() if isinstance(name, str) else ""


def _foods_from_payload(data: Any) -> Optional[list[dict]]:
    """The endpoint has served both a bare list and {"foods": [...]}; None means unusable."""
    if isinstance(data, dict):
        data = data.get("foods")
    if not isinstance(data, list):
        return None
    return [f for f in data if isinstance(f, dict) and _food_name(f)]


def find_in_foods(foods: list[dict], search_name: str) -> Optional[dict]:
    """
    Fuzzy name lookup: exact (case-insensitive), then substring,
    then word overlap covering at least half of the search words.
    """
    search = (search_name or "").strip().lower()
    if not search:
        return None

    for food in foods:
        if _food_name(food).lower() == search:
            return food

    for food in foods:
        if search in _food_name(food).lower():
            return food

    search_words = search.split()
    needed = math.ceil(len(search_words) / 2)
    for food in foods:
        food_words = _food_name(food).lower().split()
        matches = [
            sw for sw in search_words
            if any(fw in sw or sw in fw for fw in food_words)
        ]
        if len(matches) >= needed:
            return food
    return None


def _constituent(food: dict, nutrient_id: str) -> float:
    constituents = food.get("constituents")
    for c in constituents if isinstance(constituents, list) else []:
        if not isinstance(c, dict) or c.get("nutrientId") != nutrient_id:
            continue
        value = c.get("value", c.get("quantity"))
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return 0.0


def _energy(food: dict, key: str, nutrient_id: str) -> float:
    value = food.get(key)
    if isinstance(value, dict):
        value = value.get("quantity")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
        return float(value)
    return _constituent(food, nutrient_id)


def extract_standard_nutrients(food: Any) -> StandardNutrients:
    if not isinstance(food, dict):
        return StandardNutrients()
    sodium = _constituent(food, "Na")
    salt = _constituent(food, "Salt") or sodium * 2.5 / 1000
    return StandardNutrients(
        energy_kcal=_energy(food, "energyKcal", "Ener"),
        energy_kj=_energy(food, "energyKj", "EnerKJ"),
        protein=_constituent(food, "Prot"),
        fat=_constituent(food, "Fat"),
        saturated_fat=_constituent(food, "Satfa"),
        carbohydrates=_constituent(food, "Carboh"),
        sugars=_constituent(food, "Sugar"),
        fiber=_constituent(food, "Fiber"),
        salt=salt,
        sodium=sodium,
    )


class MatvaretabellenSource:
    """Reference nutrition source; only consulted when a product has no Nutri-Score."""

    name = SOURCE

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        timeout: int = 10,
        max_retries: int = 2,
        enabled: bool = True,
    ):
        self.cache = cache if cache is not None else TTLCache(
            max_entries=1, ttl_seconds=24 * 60 * 60, name=SOURCE,
        )
        self.timeout = timeout
        self.max_retries = max_retries
        self.enabled = enabled

    def load_foods(self) -> tuple[Optional[list[dict]], str]:
        """Return (foods, summary); foods is None when the table could not be fetched."""
        cached = self.cache.get(_FOODS_KEY)
        if cached is not MISSING:
            return cached, "cache_hit"

        resp, err = get_with_retries(
            MATVARETABELLEN_FOODS_URL, timeout=self.timeout, max_retries=self.max_retries,
        )
        if err is not None:
            logger.warning("MATVARETABELLEN fetch failed error=%s", err)
            return None, f"error:{err[:80]}"
        if resp.status_code >= 400:
            logger.warning("MATVARETABELLEN bad status status=%s", resp.status_code)
            return None, f"error:HTTP {resp.status_code}"
        data, err = read_json(resp)
        if err is not None:
            logger.warning("MATVARETABELLEN response error error=%s", err)
            return None, err
        foods = _foods_from_payload(data)
        if foods is None:
            logger.warning("MATVARETABELLEN unexpected payload type=%s", type(data).__name__)
            return None, "unexpected_payload"
        self.cache.set(_FOODS_KEY, foods)
        logger.info("MATVARETABELLEN loaded foods=%s", len(foods))
        return foods, f"foods={len(foods)}"

    def find_by_name(self, name: str) -> SourceResult:
        if not self.enabled:
            return unavailable(SOURCE, "disabled")
        name = re.sub(r"\s+", " ", (name or "").strip())
        if not name:
            return not_found(SOURCE, "empty_name")
        foods, summary = self.load_foods()
        if foods is None:
            return unavailable(SOURCE, summary)
        food = find_in_foods(foods, name)
        if food is None:
            logger.info("MATVARETABELLEN no match name=%s", name[:60])
            return not_found(SOURCE)
        logger.info("MATVARETABELLEN match name=%s food=%s", name[:60], _food_name(food)[:60])
        return SourceResult(food, "found", SOURCE, f"foodName={_food_name(food)[:80]}")
