"""
Shared 0-100 -> A..E thresholds used by every graded quantity.
"""
import math

from gronnest.models.score import Grade

GRADE_THRESHOLDS = (
    (80, Grade.A),
    (60, Grade.B),
    (40, Grade.C),
    (20, Grade.D),
)

# Upstream Eco-Score / Nutri-Score letter -> 0-100
UPSTREAM_GRADE_VALUES = {"a": 100, "b": 80, "c": 60, "d": 40, "e": 20}
UNKNOWN_GRADE_VALUE = 50


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up, then clamp to [0, 100]."""
    return max(0, min(100, round_half_up(value)))


def grade_from_total(total: int) -> Grade:
    for threshold, grade in GRADE_THRESHOLDS:
        if total >= threshold:
            return grade
    return Grade.E


def upstream_grade_value(grade: str) -> int:
    return UPSTREAM_GRADE_VALUES.get((grade or "").lower(), UNKNOWN_GRADE_VALUE)
