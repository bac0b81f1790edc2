"""
Field-by-field reconciliation of CanonicalProducts from several sources.
The table below is the whole merge policy: candidates are applied in source priority order.
"""
from dataclasses import dataclass, replace
from typing import Any, Literal

from gronnest.models.product import (
    AllergenInfo,
    CanonicalProduct,
    EcoScore,
    NutriScore,
    Packaging,
    is_blank,
)

MergeRule = Literal["fill_empty", "prefer_longer", "logical_or"]


@dataclass(frozen=True)
class FieldRule:
    field: str
    rule: MergeRule


RECONCILIATION_TABLE: tuple[FieldRule, ...] = (
    # More descriptive names are assumed more complete
    FieldRule("name", "prefer_longer"),
    FieldRule("brand", "fill_empty"),
    FieldRule("image_url", "fill_empty"),
    FieldRule("category", "fill_empty"),
    FieldRule("origin", "fill_empty"),
    FieldRule("is_norwegian", "logical_or"),
    FieldRule("packaging", "fill_empty"),
    FieldRule("labels", "fill_empty"),
    FieldRule("ecoscore", "fill_empty"),
    FieldRule("nutriscore", "fill_empty"),
    FieldRule("nova_group", "fill_empty"),
    FieldRule("ingredients", "fill_empty"),
    FieldRule("allergen_info", "fill_empty"),
)


def is_empty_value(value: Any) -> bool:
    """Empty, placeholder, unknown grade, NOVA 0, no packaging info, no allergen info."""
    if isinstance(value, (EcoScore, NutriScore)):
        return not value.known
    if isinstance(value, (Packaging, AllergenInfo)):
        return value.empty
    if isinstance(value, bool):
        return not value
    if isinstance(value, int):
        return value == 0
    return is_blank(value)


def _apply(rule: MergeRule, current: Any, candidate: Any) -> Any:
    if rule == "logical_or":
        return bool(current) or bool(candidate)
    if is_empty_value(candidate):
        return current
    if rule == "prefer_longer":
        if is_empty_value(current) or len(candidate) > len(current):
            return candidate
        return current
    return candidate if is_empty_value(current) else current


def merge_products(base: CanonicalProduct, *others: CanonicalProduct) -> CanonicalProduct:
    """
    Fill every empty field of base from others (first non-empty wins), never overwriting
    a non-empty base value except where the table says otherwise. Returns a new product.
    """
    values = {rule.field: getattr(base, rule.field) for rule in RECONCILIATION_TABLE}
    for other in others:
        for rule in RECONCILIATION_TABLE:
            values[rule.field] = _apply(rule.rule, values[rule.field], getattr(other, rule.field))
    return replace(base, **values)
