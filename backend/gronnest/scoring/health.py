"""
Health sub-score: Nutri-Score blended with a NOVA processing penalty,
plus the local estimate used when only reference nutrients are known.
"""
from gronnest.models.nutrition import StandardNutrients
from gronnest.models.product import CanonicalProduct
from gronnest.models.score import Grade, HealthScore
from gronnest.scoring.grades import clamp_score, grade_from_total, upstream_grade_value

BASE_SCORE = 50
NOVA_PENALTIES = {1: 0, 2: -5, 3: -10, 4: -20}


def score_health(product: CanonicalProduct) -> HealthScore:
    nutri_grade = product.nutriscore.grade
    score = BASE_SCORE * 0.6 + upstream_grade_value(nutri_grade) * 0.4
    score += NOVA_PENALTIES.get(product.nova_group, 0)
    total = clamp_score(score)
    return HealthScore(
        total=total,
        grade=grade_from_total(total),
        nutriscore=nutri_grade.upper(),
        nova=product.nova_group,
        data_available=product.nutriscore.known,
    )


def nutrient_health_estimate(nutrients: StandardNutrients) -> int:
    """0-100 estimate from per-100 g nutrients, relative to a base of 50."""
    score = float(BASE_SCORE)
    if nutrients.protein > 0:
        score += min(15, nutrients.protein / 2)
    if nutrients.fiber > 0:
        score += min(15, nutrients.fiber * 3)
    if nutrients.sugars > 10:
        score -= min(20, (nutrients.sugars - 10) * 2)
    if nutrients.saturated_fat > 5:
        score -= min(15, (nutrients.saturated_fat - 5) * 2)
    if nutrients.salt > 1.5:
        score -= min(10, (nutrients.salt - 1.5) * 5)
    return clamp_score(score)


def nutrient_grade(nutrients: StandardNutrients) -> Grade:
    return grade_from_total(nutrient_health_estimate(nutrients))
