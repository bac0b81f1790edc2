"""
External product sources: Open Food Facts (base record), Kassalapp (enrichment and prices)
and Matvaretabellen (reference nutrition).
"""
from .base import SourceResult, SourceStatus
from .open_food_facts import OpenFoodFactsSource
from .kassalapp import KassalappSource
from .matvaretabellen import MatvaretabellenSource

__all__ = [
    "SourceResult",
    "SourceStatus",
    "OpenFoodFactsSource",
    "KassalappSource",
    "MatvaretabellenSource",
]
