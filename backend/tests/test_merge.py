"""
Unit tests for field-by-field product reconciliation.
Run from backend: python -m pytest tests/test_merge.py -v
"""
from gronnest.models.product import (
    AllergenInfo,
    EcoScore,
    NutriScore,
    Packaging,
    UNKNOWN_BRAND,
    UNKNOWN_NAME,
)
from gronnest.resolution.merge import RECONCILIATION_TABLE, is_empty_value, merge_products


def test_table_covers_every_product_field(make_product):
    fields = {rule.field for rule in RECONCILIATION_TABLE}
    product_fields = set(make_product().__dataclass_fields__) - {"barcode"}
    assert fields == product_fields


def test_is_empty_value():
    assert is_empty_value("")
    assert is_empty_value(UNKNOWN_NAME)
    assert is_empty_value(())
    assert is_empty_value(0)
    assert is_empty_value(EcoScore())
    assert is_empty_value(Packaging(materials=("unknown",)))
    assert is_empty_value(AllergenInfo())
    assert not is_empty_value("Tine")
    assert not is_empty_value(3)
    assert not is_empty_value(NutriScore(grade="c"))


def test_base_values_are_kept(make_product):
    base = make_product(brand="Tine", ecoscore=EcoScore(grade="b"), nova_group=1)
    other = make_product(brand="Q-Meieriene", ecoscore=EcoScore(grade="a"), nova_group=4)
    merged = merge_products(base, other)
    assert merged.brand == "Tine"
    assert merged.ecoscore.grade == "b"
    assert merged.nova_group == 1


def test_gaps_and_placeholders_are_filled(make_product):
    base = make_product(brand=UNKNOWN_BRAND, labels=())
    other = make_product(
        brand="Tine",
        labels=("Nyt Norge",),
        image_url="https://img/1.png",
        allergen_info=AllergenInfo(allergens=("Melk",)),
    )
    merged = merge_products(base, other)
    assert merged.brand == "Tine"
    assert merged.labels == ("Nyt Norge",)
    assert merged.image_url == "https://img/1.png"
    assert merged.allergen_info.allergens == ("Melk",)


def test_longer_name_wins(make_product):
    merged = merge_products(make_product(name="Lettmelk"), make_product(name="Tine Lettmelk 1 l"))
    assert merged.name == "Tine Lettmelk 1 l"
    merged = merge_products(make_product(name="Tine Lettmelk 1 l"), make_product(name=UNKNOWN_NAME))
    assert merged.name == "Tine Lettmelk 1 l"


def test_norwegian_flag_is_logical_or(make_product):
    assert merge_products(make_product(is_norwegian=False), make_product(is_norwegian=True)).is_norwegian
    assert merge_products(make_product(is_norwegian=True), make_product(is_norwegian=False)).is_norwegian


def test_first_non_empty_candidate_wins(make_product):
    merged = merge_products(
        make_product(),
        make_product(origin="Sverige"),
        make_product(origin="Danmark"),
    )
    assert merged.origin == "Sverige"


def test_merge_returns_new_product(make_product):
    base = make_product(barcode="1")
    merged = merge_products(base, make_product(barcode="2", brand="Tine"))
    assert merged is not base
    assert base.brand == ""
    assert merged.barcode == "1"
