"""
Tests for unified search: static grocery terms, de-duplication and relevance ordering.
Run from backend: python -m pytest tests/test_ranker.py -v
"""
import pytest

from gronnest.search import LOCAL_TERMS, RelevanceRanker, dedupe, match_local_terms, relevance_score
from gronnest.search.local_terms import is_local_product, to_product


def test_match_local_terms():
    hits = match_local_terms("banan")
    assert [p.name for p in hits] == ["Banan"]
    assert hits[0].barcode == "local-banan"
    assert hits[0].is_norwegian
    assert hits[0].nova_group == 1
    assert [p.name for p in match_local_terms("epler")] == ["Eple"]
    assert match_local_terms("sjokolade") == []
    assert match_local_terms("b") == []
    # Mid-word hits do not count: "te" is inside "Potet" and "Rødbete"
    assert match_local_terms("te") == []
    assert [p.name for p in match_local_terms("økologisk banan")] == ["Banan"]


def test_local_barcodes_are_unique():
    barcodes = [to_product(t).barcode for t in LOCAL_TERMS]
    assert len(barcodes) == len(set(barcodes))
    assert to_product(LOCAL_TERMS[2]).barcode == "local-pære"
    assert all(is_local_product(to_product(t)) for t in LOCAL_TERMS)


def test_relevance_tiers(make_product):
    def rel(name):
        return relevance_score(make_product(name=name), "jordbær")

    assert rel("Jordbær") == 200
    assert rel("Jordbærsyltetøy") == 150
    assert rel("Ferske jordbær fra Norge") == 100
    assert rel("Yoghurt med jordbær") == 30
    assert rel("Frokostblanding med frysetørket jordbærbiter") == 20
    assert rel("Havregryn") == 0


def test_category_and_processing_adjustments(make_product):
    base = relevance_score(make_product(name="Eple"), "eple")
    assert relevance_score(make_product(name="Eple", category="Frukt og grønt"), "eple") == base + 50
    assert relevance_score(make_product(name="Eple", category="Drikke"), "eple") == base - 10
    assert relevance_score(make_product(name="Eple", nova_group=1), "eple") == base + 30
    assert relevance_score(make_product(name="Eple", nova_group=2), "eple") == base + 15
    assert relevance_score(make_product(name="Eple", nova_group=4), "eple") == base - 20


def test_dedupe_first_occurrence_wins(make_product):
    a = make_product(barcode="1", name="Banan")
    b = make_product(barcode="2", name="banan ")
    c = make_product(barcode="1", name="Banan økologisk")
    d = make_product(barcode="", name="Bananmelk")
    assert dedupe([a, b, c, d]) == [a, d]


@pytest.mark.asyncio
async def test_static_entry_beats_flavoured_product(fake_source, make_product):
    off = fake_source("open_food_facts", searches={
        "banan": [make_product(barcode="7038010013966", name="Bananmelk med vanilje")],
    })
    kassalapp = fake_source("kassalapp", searches={
        "banan": [make_product(barcode="2000000000001", name="Banan", category="Frukt")],
    })
    results = await RelevanceRanker(off, kassalapp).search("banan")
    names = [p.name for p in results]
    assert names.index("Banan") < names.index("Bananmelk med vanilje")
    # The static entry came first, so the Kassalapp "Banan" was a duplicate
    assert results[0].barcode == "local-banan"
    assert len(results) == 2


@pytest.mark.asyncio
async def test_short_query_returns_nothing(fake_source):
    off = fake_source("open_food_facts")
    kassalapp = fake_source("kassalapp")
    assert await RelevanceRanker(off, kassalapp).search(" b ") == []
    assert off.calls == []
    assert kassalapp.calls == []


@pytest.mark.asyncio
async def test_failed_source_is_skipped(fake_source, make_product):
    off = fake_source("open_food_facts", error=ConnectionError("down"))
    kassalapp = fake_source("kassalapp", searches={
        "lettmelk": [make_product(barcode="1", name="Tine Lettmelk")],
    })
    results = await RelevanceRanker(off, kassalapp).search("lettmelk")
    assert [p.name for p in results] == ["Tine Lettmelk"]


@pytest.mark.asyncio
async def test_limit_and_stable_order(fake_source, make_product):
    hits = [make_product(barcode=str(i), name=f"Knekkebrød {i}") for i in range(6)]
    off = fake_source("open_food_facts", searches={"knekkebrød": hits})
    kassalapp = fake_source("kassalapp")
    results = await RelevanceRanker(off, kassalapp).search("knekkebrød", limit=4)
    # Equal relevance keeps merge order
    assert [p.barcode for p in results] == ["0", "1", "2", "3"]


@pytest.mark.asyncio
async def test_short_query_does_not_promote_unrelated_static_terms(fake_source, make_product):
    off = fake_source("open_food_facts", searches={
        "te": [make_product(barcode="8722700479274", name="Te grønn Lipton")],
    })
    kassalapp = fake_source("kassalapp")
    results = await RelevanceRanker(off, kassalapp).search("te")
    assert [p.name for p in results] == ["Te grønn Lipton"]
