"""
Canonical, source-agnostic product representation.
Every field has a defined default so translators never propagate missing values.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

# Placeholders used by translators when a source has no value. Treated as empty when merging.
UNKNOWN_NAME = "Ukjent produkt"
UNKNOWN_BRAND = "Ukjent merke"
UNKNOWN_CATEGORY = "Ukjent kategori"
PLACEHOLDERS = frozenset({UNKNOWN_NAME, UNKNOWN_BRAND, UNKNOWN_CATEGORY, "Ukjent"})

UNKNOWN_GRADE = "unknown"
UPSTREAM_GRADES = ("a", "b", "c", "d", "e")


def normalize_grade(raw: Any) -> str:
    """Upstream A-E grade -> 'a'..'e', anything else -> 'unknown'."""
    if not isinstance(raw, str):
        return UNKNOWN_GRADE
    g = raw.strip().lower()
    return g if g in UPSTREAM_GRADES else UNKNOWN_GRADE


def normalize_nova(raw: Any) -> int:
    """NOVA group 1-4; 0 means unknown."""
    try:
        n = int(raw)
    except (TypeError, ValueError):
        return 0
    return n if 1 <= n <= 4 else 0


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip() or value.strip() in PLACEHOLDERS
    if isinstance(value, (tuple, list, set, frozenset)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class EcoScore:
    grade: str = UNKNOWN_GRADE
    score: float = 0
    has_detailed_data: bool = False

    @property
    def known(self) -> bool:
        return self.grade != UNKNOWN_GRADE


@dataclass(frozen=True)
class NutriScore:
    grade: str = UNKNOWN_GRADE
    score: float = 0

    @property
    def known(self) -> bool:
        return self.grade != UNKNOWN_GRADE


@dataclass(frozen=True)
class AllergenInfo:
    allergens: tuple[str, ...] = ()
    traces: tuple[str, ...] = ()  # "may contain traces of"

    @property
    def has_allergens(self) -> bool:
        return len(self.allergens) > 0

    @property
    def has_traces(self) -> bool:
        return len(self.traces) > 0

    @property
    def empty(self) -> bool:
        return not self.allergens and not self.traces


@dataclass(frozen=True)
class Packaging:
    text: str = ""
    # Normalized material tags, see scoring.classifiers.PackagingMaterial
    materials: tuple[str, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.text.strip() and not any(m != "unknown" for m in self.materials)


@dataclass(frozen=True)
class CanonicalProduct:
    barcode: str
    name: str = ""
    brand: str = ""
    image_url: str = ""
    category: str = ""
    origin: str = ""
    is_norwegian: bool = False
    packaging: Packaging = field(default_factory=Packaging)
    labels: tuple[str, ...] = ()
    ecoscore: EcoScore = field(default_factory=EcoScore)
    nutriscore: NutriScore = field(default_factory=NutriScore)
    nova_group: int = 0
    ingredients: str = ""
    allergen_info: AllergenInfo = field(default_factory=AllergenInfo)

    def to_dict(self) -> dict:
        return {
            "barcode": self.barcode,
            "name": self.name,
            "brand": self.brand,
            "imageUrl": self.image_url,
            "category": self.category,
            "origin": self.origin,
            "isNorwegian": self.is_norwegian,
            "packaging": {
                "text": self.packaging.text,
                "materials": list(self.packaging.materials),
            },
            "labels": list(self.labels),
            "ecoscore": {
                "grade": self.ecoscore.grade,
                "score": self.ecoscore.score,
                "hasDetailedData": self.ecoscore.has_detailed_data,
            },
            "nutriscore": {
                "grade": self.nutriscore.grade,
                "score": self.nutriscore.score,
            },
            "novaGroup": self.nova_group,
            "ingredients": self.ingredients,
            "allergenInfo": {
                "allergens": list(self.allergen_info.allergens),
                "traces": list(self.allergen_info.traces),
                "hasAllergens": self.allergen_info.has_allergens,
                "hasTraces": self.allergen_info.has_traces,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CanonicalProduct":
        packaging = d.get("packaging") or {}
        eco = d.get("ecoscore") or {}
        nutri = d.get("nutriscore") or {}
        allergens = d.get("allergenInfo") or {}
        return cls(
            barcode=str(d.get("barcode") or ""),
            name=d.get("name") or "",
            brand=d.get("brand") or "",
            image_url=d.get("imageUrl") or "",
            category=d.get("category") or "",
            origin=d.get("origin") or "",
            is_norwegian=bool(d.get("isNorwegian", False)),
            packaging=Packaging(
                text=packaging.get("text") or "",
                materials=tuple(packaging.get("materials") or ()),
            ),
            labels=tuple(d.get("labels") or ()),
            ecoscore=EcoScore(
                grade=normalize_grade(eco.get("grade")),
                score=eco.get("score") or 0,
                has_detailed_data=bool(eco.get("hasDetailedData", False)),
            ),
            nutriscore=NutriScore(
                grade=normalize_grade(nutri.get("grade")),
                score=nutri.get("score") or 0,
            ),
            nova_group=normalize_nova(d.get("novaGroup")),
            ingredients=d.get("ingredients") or "",
            allergen_info=AllergenInfo(
                allergens=tuple(allergens.get("allergens") or ()),
                traces=tuple(allergens.get("traces") or ()),
            ),
        )


@dataclass(frozen=True)
class DataSources:
    """Which sources contributed to one resolution. Never part of product identity."""
    open_food_facts: bool = False
    kassalapp: bool = False
    matvaretabellen: bool = False

    def quality_bonus(self) -> int:
        bonus = 0
        if self.kassalapp:
            bonus += 20  # Norwegian-specific data
        if self.open_food_facts:
            bonus += 10
        if self.matvaretabellen:
            bonus += 10
        return bonus

    def to_dict(self) -> dict:
        return {
            "openFoodFacts": self.open_food_facts,
            "kassalapp": self.kassalapp,
            "matvaretabellen": self.matvaretabellen,
        }


@dataclass(frozen=True)
class PriceInfo:
    lowest_price: float
    store: str
    currency: str = "NOK"

    def to_dict(self) -> dict:
        return {"lowestPrice": self.lowest_price, "store": self.store, "currency": self.currency}


@dataclass(frozen=True)
class EnrichedProduct:
    """Resolver output: the fused product plus provenance."""
    product: CanonicalProduct
    data_sources: DataSources
    kassalapp_raw: Optional[dict] = None
    matvaretabellen_raw: Optional[dict] = None
    price_info: Optional[PriceInfo] = None

    @property
    def barcode(self) -> str:
        return self.product.barcode

    def to_dict(self) -> dict:
        out = self.product.to_dict()
        out["dataSources"] = self.data_sources.to_dict()
        out["dataQualityBonus"] = self.data_sources.quality_bonus()
        out["priceInfo"] = self.price_info.to_dict() if self.price_info else None
        return out
