"""
Scoring Engine: sustainability composite, health sub-score and the pure classifiers behind them.
"""
from .sustainability import score
from .health import score_health, nutrient_health_estimate

__all__ = ["score", "score_health", "nutrient_health_estimate"]
