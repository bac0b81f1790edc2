from .product import (
    AllergenInfo,
    CanonicalProduct,
    DataSources,
    EcoScore,
    EnrichedProduct,
    NutriScore,
    Packaging,
    PriceInfo,
)
from .nutrition import StandardNutrients
from .score import BreakdownItem, CO2Estimate, Grade, HealthScore, ScoreResult

__all__ = [
    "AllergenInfo",
    "CanonicalProduct",
    "DataSources",
    "EcoScore",
    "EnrichedProduct",
    "NutriScore",
    "Packaging",
    "PriceInfo",
    "StandardNutrients",
    "BreakdownItem",
    "CO2Estimate",
    "Grade",
    "HealthScore",
    "ScoreResult",
]
