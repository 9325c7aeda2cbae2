"""
End-to-end scenario: Pinus through time, then switching to Quercus.
"""

import pytest

from pollenmap.core.filter_engine import filter_observations
from pollenmap.core.input_state import InputState
from pollenmap.core.scheduler import ReactiveScheduler
from pollenmap.exceptions import InvalidInputError
from pollenmap.view.view_updater import ViewUpdater


@pytest.fixture
def session(scenario_store, fake_widget):
    inputs = InputState(scenario_store.known_taxa(), -50, 15000)
    scheduler = ReactiveScheduler(scenario_store, inputs, ViewUpdater(fake_widget), half_window=250)
    scheduler.start()
    return inputs, scheduler, fake_widget


class TestPollenScenario:
    """Pinus samples 10,000 years apart, then a switch to Quercus."""

    def test_filter_direct(self, scenario_store):
        """Pinus at 0 and 10000 and Quercus at 10000 filter as expected."""
        first, second, _ = scenario_store.observations()
        assert filter_observations(scenario_store, 0, "Pinus", 250) == (first,)
        assert filter_observations(scenario_store, 10000, "Pinus", 250) == (second,)
        assert filter_observations(scenario_store, 10000, "Quercus", 250) == ()

    def test_scheduler_walkthrough(self, session, scenario_store):
        """Moving through time then switching taxon updates the markers."""
        inputs, scheduler, widget = session
        first, second, _ = scenario_store.observations()

        inputs.set_time(0)
        inputs.set_taxon("Pinus")
        scheduler.flush()
        assert scheduler.last_subset == (first,)
        assert list(widget.markers.values()) == [(49.0, -123.0, pytest.approx(0.2))]

        inputs.set_time(10000)
        scheduler.flush()
        assert scheduler.last_subset == (second,)
        assert list(widget.markers.values()) == [(50.0, -100.0, pytest.approx(0.05))]

        inputs.set_taxon("Quercus")
        scheduler.flush()
        assert scheduler.last_subset == ()
        assert widget.markers == {}
        assert scheduler.rendered == {}

    def test_out_of_range_time_leaves_view(self, session):
        """A rejected time leaves the inputs and map unchanged."""
        inputs, scheduler, widget = session
        inputs.set_time(0)
        inputs.set_taxon("Pinus")
        scheduler.flush()
        shown = dict(widget.markers)
        cycles = scheduler.cycle_count

        with pytest.raises(InvalidInputError):
            inputs.set_time(999999)
        assert scheduler.flush() == 0
        assert inputs.current() == (0.0, "Pinus")
        assert widget.markers == shown
        assert scheduler.cycle_count == cycles
