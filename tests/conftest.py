"""Shared fixtures for pollenmap tests."""

from contextlib import contextmanager

import pytest

from pollenmap.data.record_store import RecordStore


def make_row(taxon, age, lat=45.0, lng=-90.0, pct=20.0, site="Test Lake"):
    return {
        "SiteName": site,
        "Latitude": lat,
        "Longitude": lng,
        "Age": age,
        "Taxon": taxon,
        "Pct": pct,
    }


class FakeMapWidget:
    """Map widget double that records calls and can be told to fail."""

    supports_keyed_removal = True

    def __init__(self, fail_on_add_after=None, on_add=None, max_failures=None):
        self.markers = {}
        self.calls = []
        self.batches = 0
        self.fail_on_add_after = fail_on_add_after
        self.on_add = on_add
        # Stop failing after this many rejected adds (None: keep failing)
        self.max_failures = max_failures
        self._adds = 0
        self._next_key = 0

    @contextmanager
    def batch(self):
        self.batches += 1
        yield

    def add_marker(self, lat, lng, intensity, key=None):
        if self.fail_on_add_after is not None and self._adds >= self.fail_on_add_after:
            if self.max_failures is not None:
                self.max_failures -= 1
                if self.max_failures <= 0:
                    self.fail_on_add_after = None
            raise RuntimeError("widget rejected marker")
        self._adds += 1
        if key is None:
            key = ("auto", self._next_key)
            self._next_key += 1
        self.calls.append(("add", key))
        self.markers[key] = (lat, lng, intensity)
        if self.on_add is not None:
            self.on_add(key)

    def remove_marker(self, key):
        self.calls.append(("remove", key))
        del self.markers[key]

    def clear_markers(self):
        self.calls.append(("clear", None))
        self.markers.clear()

    def set_view(self, lat, lng, zoom):
        self.calls.append(("set_view", (lat, lng, zoom)))


@pytest.fixture
def scenario_rows():
    """Two Pinus samples 10,000 years apart plus a Quercus sample mid-way."""
    return [
        make_row("Pinus", 0, lat=49.0, lng=-123.0, pct=20, site="Marion Lake"),
        make_row("Pinus", 10000, lat=50.0, lng=-100.0, pct=5, site="Devils Lake"),
        make_row("Quercus", 5000, lat=40.0, lng=-80.0, pct=40, site="Silver Lake"),
    ]


@pytest.fixture
def scenario_store(scenario_rows):
    return RecordStore.load(scenario_rows)


@pytest.fixture
def window_rows():
    """Pinus samples spread around age 1000, plus other taxa at the same ages."""
    rows = [make_row("Pinus", age, pct=15) for age in (500, 749, 750, 751, 1000, 1249, 1250, 1251, 1500)]
    rows += [make_row("Betula", age, pct=25) for age in (750, 1000, 1250)]
    rows.append(make_row("Ilex", 1000, pct=2))
    return rows


@pytest.fixture
def window_store(window_rows):
    return RecordStore.load(window_rows)


@pytest.fixture
def fake_widget():
    return FakeMapWidget()
