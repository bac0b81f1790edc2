"""
Shared fixtures: a CanonicalProduct factory and in-memory fake sources.
Run from backend: python -m pytest tests/ -v
"""
import threading

import pytest

from gronnest.external_apis.base import SourceResult, not_found
from gronnest.models.product import CanonicalProduct


class FakeSource:
    """
    Implements the adapter protocol without network I/O.
    barcodes: barcode -> payload; searches: lowercase query -> list of CanonicalProduct.
    When error is set every call raises it.
    """

    def __init__(self, name, barcodes=None, searches=None, error=None):
        self.name = name
        self.barcodes = barcodes or {}
        self.searches = searches or {}
        self.error = error
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, op, arg):
        with self._lock:
            self.calls.append((op, arg))

    def _lookup(self, op, key):
        self._record(op, key)
        if self.error is not None:
            raise self.error
        payload = self.barcodes.get(key)
        if payload is None:
            return not_found(self.name)
        return SourceResult(payload, "found", self.name, "fake")

    def fetch_by_barcode(self, barcode):
        return self._lookup("fetch_by_barcode", barcode)

    def find_by_name(self, name):
        return self._lookup("find_by_name", name)

    def search(self, query, limit=10):
        self._record("search", query)
        if self.error is not None:
            raise self.error
        hits = list(self.searches.get(query.lower(), []))[:limit]
        return SourceResult(hits, "found" if hits else "not_found", self.name, "fake")


@pytest.fixture
def make_product():
    def _make(**overrides):
        fields = {"barcode": "7038010009457"}
        fields.update(overrides)
        return CanonicalProduct(**fields)
    return _make


@pytest.fixture
def fake_source():
    return FakeSource
