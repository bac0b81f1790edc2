"""
Per-100 g nutrient values from the reference nutrition table.
"""
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class StandardNutrients:
    energy_kcal: float = 0
    energy_kj: float = 0
    protein: float = 0
    fat: float = 0
    saturated_fat: float = 0
    carbohydrates: float = 0
    sugars: float = 0
    fiber: float = 0
    salt: float = 0
    sodium: float = 0  # mg

    def to_dict(self) -> dict:
        return asdict(self)
