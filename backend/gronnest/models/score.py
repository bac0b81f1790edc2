"""
Scoring Engine output types. Computed fresh per call; no identity, no persistence.
"""
from dataclasses import dataclass, field
from enum import Enum


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


BREAKDOWN_ORDER = ("ecoscore", "transport", "norwegian", "packaging", "certifications")


@dataclass(frozen=True)
class BreakdownItem:
    score: int
    label: str
    rationale: str
    data_available: bool
    # Data-quality credit: 20 for a real signal, 10 for a secondary confirming signal, else 0
    quality_points: int = 0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "label": self.label,
            "rationale": self.rationale,
            "dataAvailable": self.data_available,
        }


@dataclass(frozen=True)
class HealthScore:
    total: int
    grade: Grade
    nutriscore: str  # upstream letter, upper-case, or "UNKNOWN"
    nova: int
    data_available: bool

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "grade": self.grade.value,
            "nutriscore": self.nutriscore,
            "nova": self.nova,
            "dataAvailable": self.data_available,
        }


@dataclass(frozen=True)
class CO2Estimate:
    grams_per_100g: int
    category: str
    is_plant_based: bool
    description: str

    def to_dict(self) -> dict:
        return {
            "gramsPer100g": self.grams_per_100g,
            "category": self.category,
            "isPlantBased": self.is_plant_based,
            "description": self.description,
        }


@dataclass(frozen=True)
class ScoreResult:
    total: int
    grade: Grade
    breakdown: dict[str, BreakdownItem]
    data_quality: int
    health_score: HealthScore
    co2_estimate: CO2Estimate
    certifications: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "grade": self.grade.value,
            "breakdown": {k: self.breakdown[k].to_dict() for k in BREAKDOWN_ORDER},
            "dataQuality": self.data_quality,
            "healthScore": self.health_score.to_dict(),
            "co2Estimate": self.co2_estimate.to_dict(),
            "certifications": list(self.certifications),
        }
