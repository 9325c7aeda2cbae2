"""
Main Server Function for the pollen explorer Shiny app

Wires the Shiny controls into the session's InputState and lets the
ReactiveScheduler drive the ipyleaflet marker layer.
"""

from typing import Any, NamedTuple

from shiny import render, ui, reactive
from shinywidgets import render_widget
import logging

from pollenmap.core.filter_engine import window_bounds
from pollenmap.core.input_state import InputSnapshot, InputState, SELECTED_TAXON, TIME_POSITION
from pollenmap.core.scheduler import ReactiveScheduler
from pollenmap.data.record_store import RecordStore
from pollenmap.exceptions import InvalidInputError, RenderFailure
from pollenmap.parameters import ExplorerParameters
from pollenmap.view.map_widget import LeafletMarkerMap
from pollenmap.view.view_updater import UpdateMode, ViewUpdater
from .reactive_state import ExplorerState

logger = logging.getLogger("POLLENMAP")


# =========================================================================
# Helper functions for testability (defined at module level)
# =========================================================================

def _build_status_lines(snapshot, marker_count, half_window, last_error=None, update_count=0):
    """Build the status panel lines (pure helper for testing).

    Args:
        snapshot: InputSnapshot of the rendered view, or None before the first cycle
        marker_count: Number of markers on the map
        half_window: Filter half-window in years
        last_error: Message of the last failed cycle, if any
        update_count: Successful cycles so far; shown when non-zero

    Returns:
        List of strings
    """
    if snapshot is None:
        return ["Waiting for first update..."]
    low, high = window_bounds(snapshot.time_position, half_window)
    lines = [
        f"Taxon: {snapshot.selected_taxon}",
        f"Ages: {low:g} to {high:g} yr BP",
        f"Samples shown: {marker_count}",
    ]
    if update_count:
        lines.append(f"Map updates: {update_count}")
    if last_error:
        lines.append(f"⚠ Last update failed: {last_error}")
    return lines


class RejectedInput(NamedTuple):
    """A control value InputState refused, and the value to put back."""
    field: str
    message: str
    restore_value: Any


def _apply_control_values(inputs, time_value, taxon):
    """Push control values into InputState (pure helper for testing).

    Args:
        inputs: Session InputState
        time_value: Value reported by the time slider
        taxon: Value reported by the taxon select

    Returns:
        List of RejectedInput, one per control whose value was refused
    """
    rejected = []
    try:
        inputs.set_time(time_value)
    except InvalidInputError as e:
        logger.warning(f"Rejected time input: {e}")
        rejected.append(RejectedInput(TIME_POSITION, str(e), inputs.time_position))

    try:
        inputs.set_taxon(taxon)
    except InvalidInputError as e:
        logger.warning(f"Rejected taxon input: {e}")
        rejected.append(RejectedInput(SELECTED_TAXON, str(e), inputs.selected_taxon))
    return rejected


def build_session(store: RecordStore, params: ExplorerParameters, state: ExplorerState,
                  notify=None):
    """
    Create the session-owned input state, map and scheduler.

    Args:
        store: Shared read-only record store
        params: Explorer parameters
        state: Session reactive state to mirror cycle results into
        notify: Optional ``callable(message, type)`` for user notices

    Returns:
        Tuple of (InputState, LeafletMarkerMap, ReactiveScheduler)
    """
    inputs = InputState(
        store.known_taxa(),
        params.time_min,
        params.time_max,
        time_position=params.initial_time,
        selected_taxon=params.default_taxon,
    )
    leaflet_map = LeafletMarkerMap(params)
    updater = ViewUpdater(leaflet_map, UpdateMode(params.update_mode))

    def on_cycle(snapshot: InputSnapshot, subset, markers):
        state.record_cycle(snapshot, len(markers))

    def on_failure(error: Exception):
        state.record_failure(str(error), len(scheduler.rendered))
        if notify is not None:
            kind = "warning" if isinstance(error, RenderFailure) else "error"
            notify(f"Map not updated: {error}", kind)

    scheduler = ReactiveScheduler(
        store, inputs, updater, params.half_window,
        on_cycle=on_cycle, on_failure=on_failure,
    )
    return inputs, leaflet_map, scheduler


def create_server(store: RecordStore, params: ExplorerParameters = None):
    """Return the Shiny server function bound to a record store."""
    params = params or ExplorerParameters()

    def server(input, output, session):
        """Main server function for the pollen explorer."""
        logger.info("Server function initialized")

        state = ExplorerState()

        def notify(message, kind):
            ui.notification_show(message, type=kind, duration=5)

        inputs, leaflet_map, scheduler = build_session(store, params, state, notify)
        scheduler.start()
        session.on_ended(scheduler.close)

        # =====================================================================
        # Map
        # =====================================================================

        @render_widget
        def pollen_map():
            """Persistent map; markers are updated in place by the scheduler."""
            return leaflet_map.map

        # =====================================================================
        # Controls -> InputState -> Scheduler
        # =====================================================================

        @reactive.effect
        def sync_inputs():
            """Push control values into the input state and run pending cycles."""
            for rejected in _apply_control_values(inputs, input.time_position(), input.taxon()):
                ui.notification_show(rejected.message, type="warning", duration=3)
                if rejected.field == TIME_POSITION:
                    ui.update_slider("time_position", value=rejected.restore_value)
                else:
                    ui.update_select("taxon", selected=rejected.restore_value)

            cycles = scheduler.flush()
            if cycles:
                logger.debug(f"Ran {cycles} reactive cycle(s) for {inputs.current()}")

        # =====================================================================
        # Status
        # =====================================================================

        @render.ui
        def status_panel():
            """Show what the map currently displays."""
            lines = _build_status_lines(
                state.snapshot(), state.marker_count(), params.half_window, state.last_error(),
                state.cycle_count(),
            )
            return ui.div(
                *[ui.p(line, class_="mb-1") for line in lines],
                ui.p(state.status_message(), class_="text-muted small mb-0"),
                class_="small"
            )

    return server
