"""
Tests for barcode resolution across fake sources.
Run from backend: python -m pytest tests/test_resolver.py -v
"""
from dataclasses import replace

import pytest

from gronnest.models.product import EcoScore, NutriScore, Packaging
from gronnest.resolution import ProductResolver
from gronnest.resolution.resolver import nutrition_query

BARCODE = "7038010009457"

KASSALAPP_RAW = {
    "ean": BARCODE,
    "name": "Tine Lettmelk 1 l kartong",
    "brand": "Tine",
    "image": "https://bilder.kassal.app/lettmelk.png",
    "category": [{"name": "Meieri"}],
    "store_prices": [{"store": {"name": "Kiwi"}, "price": {"current": 21.5}}],
}

MELK = {
    "foodName": "Melk, lett",
    "constituents": [{"nutrientId": "Prot", "quantity": 20}],
}


@pytest.fixture
def off_product(make_product):
    return make_product(
        barcode=BARCODE,
        name="Lettmelk",
        brand="",
        ecoscore=EcoScore(grade="b"),
        packaging=Packaging(text="Kartong"),
    )


@pytest.mark.asyncio
async def test_resolve_merges_all_sources(fake_source, off_product):
    off = fake_source("open_food_facts", barcodes={BARCODE: off_product})
    kassalapp = fake_source("kassalapp", barcodes={BARCODE: KASSALAPP_RAW})
    nutrition = fake_source("matvaretabellen", barcodes={"Tine Lettmelk": MELK})
    enriched = await ProductResolver(off, kassalapp, nutrition).resolve(BARCODE)

    product = enriched.product
    assert product.name == "Tine Lettmelk 1 l kartong"
    assert product.brand == "Tine"
    assert product.ecoscore.grade == "b"
    assert product.is_norwegian
    # 50 + min(15, 20 / 2) = 60 -> B
    assert product.nutriscore == NutriScore(grade="b", score=60)
    assert enriched.data_sources.open_food_facts
    assert enriched.data_sources.kassalapp
    assert enriched.data_sources.matvaretabellen
    assert enriched.data_sources.quality_bonus() == 40
    assert enriched.kassalapp_raw == KASSALAPP_RAW
    assert enriched.matvaretabellen_raw == MELK
    assert enriched.price_info.lowest_price == 21.5
    assert nutrition.calls == [("find_by_name", "Tine Lettmelk")]


@pytest.mark.asyncio
async def test_resolve_kassalapp_only(fake_source):
    off = fake_source("open_food_facts")
    kassalapp = fake_source("kassalapp", barcodes={BARCODE: KASSALAPP_RAW})
    enriched = await ProductResolver(off, kassalapp).resolve(BARCODE)
    assert enriched.product.name == "Tine Lettmelk 1 l kartong"
    assert enriched.product.category == "Meieri"
    assert not enriched.data_sources.open_food_facts
    assert enriched.data_sources.quality_bonus() == 20


@pytest.mark.asyncio
async def test_resolve_not_found_everywhere(fake_source):
    off = fake_source("open_food_facts")
    kassalapp = fake_source("kassalapp")
    assert await ProductResolver(off, kassalapp).resolve(BARCODE) is None


@pytest.mark.asyncio
async def test_failing_source_contributes_nothing(fake_source, off_product):
    off = fake_source("open_food_facts", barcodes={BARCODE: off_product})
    kassalapp = fake_source("kassalapp", error=RuntimeError("boom"))
    enriched = await ProductResolver(off, kassalapp).resolve(BARCODE)
    assert enriched.product.name == "Lettmelk"
    assert not enriched.data_sources.kassalapp
    assert enriched.price_info is None


@pytest.mark.asyncio
async def test_nutrition_only_when_nutriscore_unknown(fake_source, off_product):
    known = replace(off_product, nutriscore=NutriScore(grade="a", score=-2))
    off = fake_source("open_food_facts", barcodes={BARCODE: known})
    kassalapp = fake_source("kassalapp")
    nutrition = fake_source("matvaretabellen", barcodes={"Lettmelk": MELK})
    enriched = await ProductResolver(off, kassalapp, nutrition).resolve(BARCODE)
    assert enriched.product.nutriscore.grade == "a"
    assert not enriched.data_sources.matvaretabellen
    assert nutrition.calls == []


@pytest.mark.asyncio
async def test_nutrition_skipped_for_placeholder_name(fake_source):
    kassalapp = fake_source("kassalapp", barcodes={BARCODE: {"ean": BARCODE}})
    nutrition = fake_source("matvaretabellen")
    enriched = await ProductResolver(fake_source("open_food_facts"), kassalapp, nutrition).resolve(BARCODE)
    assert enriched is not None
    assert nutrition.calls == []


@pytest.mark.asyncio
async def test_resolve_is_idempotent(fake_source, off_product):
    off = fake_source("open_food_facts", barcodes={BARCODE: off_product})
    kassalapp = fake_source("kassalapp", barcodes={BARCODE: KASSALAPP_RAW})
    nutrition = fake_source("matvaretabellen", barcodes={"Tine Lettmelk": MELK})
    resolver = ProductResolver(off, kassalapp, nutrition)
    first = await resolver.resolve(BARCODE)
    second = await resolver.resolve(BARCODE)
    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.asyncio
async def test_blank_barcode(fake_source):
    off = fake_source("open_food_facts")
    kassalapp = fake_source("kassalapp")
    assert await ProductResolver(off, kassalapp).resolve("  ") is None
    assert off.calls == []


def test_nutrition_query():
    assert nutrition_query("Tine Lettmelk 1 l kartong") == "Tine Lettmelk"
    assert nutrition_query("Ukjent produkt") == ""
    assert nutrition_query("") == ""


@pytest.mark.asyncio
async def test_enriched_to_dict(fake_source, off_product):
    off = fake_source("open_food_facts", barcodes={BARCODE: off_product})
    kassalapp = fake_source("kassalapp", barcodes={BARCODE: KASSALAPP_RAW})
    d = (await ProductResolver(off, kassalapp).resolve(BARCODE)).to_dict()
    assert d["barcode"] == BARCODE
    assert d["dataSources"] == {"openFoodFacts": True, "kassalapp": True, "matvaretabellen": False}
    assert d["dataQualityBonus"] == 30
    assert d["priceInfo"] == {"lowestPrice": 21.5, "store": "Kiwi", "currency": "NOK"}
