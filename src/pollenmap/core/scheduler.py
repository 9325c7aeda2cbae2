"""
Reactive scheduler for the filter-and-redraw loop.

A single-threaded state machine (Idle -> Dirty -> Recomputing -> Idle) that
re-runs the filter engine and view updater when, and only when, one of its
declared input fields changes. Rapid changes are coalesced: while a cycle
is running, any number of further changes produce exactly one trailing
cycle with the latest input snapshot.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional, Tuple

from pollenmap.core.filter_engine import filter_observations
from pollenmap.core.input_state import InputSnapshot, InputState, SELECTED_TAXON, TIME_POSITION
from pollenmap.data.observation import Observation
from pollenmap.data.record_store import RecordStore
from pollenmap.exceptions import RenderFailure
from pollenmap.view.view_updater import EMPTY_MARKERS, MarkerSet, ViewUpdater

logger = logging.getLogger("POLLENMAP")


class SchedulerState(Enum):
    """Scheduler states."""
    IDLE = auto()
    DIRTY = auto()
    RECOMPUTING = auto()


class ReactiveScheduler:
    """
    Runs reactive cycles for one session.

    Each cycle takes one ``InputState.current()`` snapshot, filters the record
    store and applies the result to the view. The rendered marker set and the
    last subset are committed only after both steps succeed, so the view always
    matches a single snapshot. If a failed update could not be undone on the
    widget either, the rendered set is dropped to empty and the next cycle
    redraws every marker.

    Example:
        scheduler = ReactiveScheduler(store, inputs, updater, half_window=250)
        scheduler.start()            # populate the first view
        inputs.set_time(5000)        # -> Dirty
        scheduler.flush()            # -> one cycle, back to Idle

    Args:
        store: Read-only record store
        input_state: Session input state (the scheduler subscribes to it)
        view_updater: Applies subsets to the map widget
        half_window: Filter half-window
        defer: Optional ``callable(fn)`` that schedules ``fn`` to run later
            (e.g. ``loop.call_soon``). When given, the first change after Idle
            schedules one flush; later changes before it runs are coalesced.
        on_cycle: Called with ``(snapshot, subset, markers)`` after a successful cycle
        on_failure: Called with the exception when a cycle fails
    """

    DEPENDENCIES: Tuple[str, ...] = (TIME_POSITION, SELECTED_TAXON)

    def __init__(
        self,
        store: RecordStore,
        input_state: InputState,
        view_updater: ViewUpdater,
        half_window: float,
        defer: Optional[Callable[[Callable[[], None]], object]] = None,
        on_cycle: Optional[Callable[[InputSnapshot, Tuple[Observation, ...], MarkerSet], None]] = None,
        on_failure: Optional[Callable[[Exception], None]] = None,
    ):
        self.store = store
        self.input_state = input_state
        self.view_updater = view_updater
        self.half_window = half_window
        self._defer = defer
        self._on_cycle = on_cycle
        self._on_failure = on_failure

        self._state = SchedulerState.IDLE
        self._pending = False
        self._flush_scheduled = False

        self._rendered: MarkerSet = EMPTY_MARKERS
        # Set when a failed restore left the widget contents unknown
        self._needs_full_replace = False
        self._last_subset: Tuple[Observation, ...] = ()
        self._last_snapshot: Optional[InputSnapshot] = None
        self._last_error: Optional[Exception] = None
        self._cycle_count = 0
        self._failure_count = 0

        self._unsubscribe = input_state.subscribe(self.DEPENDENCIES, self._on_input_changed)

    # =========================================================================
    # Triggers
    # =========================================================================

    def _on_input_changed(self, field: str) -> None:
        logger.debug(f"Input changed: {field} (state={self._state.name})")
        self.invalidate()

    def invalidate(self) -> None:
        """Mark the reactive unit dirty and, if deferring, schedule a flush."""
        if self._state is SchedulerState.RECOMPUTING:
            # Superseded: only the latest snapshot will be rendered
            self._pending = True
            return
        self._state = SchedulerState.DIRTY
        if self._defer is not None and not self._flush_scheduled:
            self._flush_scheduled = True
            self._defer(self._deferred_flush)

    def _deferred_flush(self) -> None:
        self._flush_scheduled = False
        self.flush()

    def start(self) -> int:
        """Initial trigger: populate the first view."""
        logger.info(f"Scheduler started: {self.input_state.current()}")
        self.invalidate()
        return self.flush()

    def close(self) -> None:
        """Stop listening to input changes."""
        self._unsubscribe()

    # =========================================================================
    # Cycles
    # =========================================================================

    def flush(self) -> int:
        """
        Run cycles until nothing is pending.

        Returns:
            Number of cycles run. Re-entrant calls made while a cycle is
            running return 0; the change is picked up by the trailing cycle.
        """
        if self._state is SchedulerState.RECOMPUTING:
            return 0

        cycles = 0
        while self._state is SchedulerState.DIRTY:
            self._state = SchedulerState.RECOMPUTING
            self._pending = False
            try:
                self._run_cycle()
            finally:
                cycles += 1
                self._state = SchedulerState.DIRTY if self._pending else SchedulerState.IDLE
        return cycles

    def _run_cycle(self) -> None:
        snapshot = self.input_state.current()
        self._cycle_count += 1
        logger.debug(f"Cycle {self._cycle_count}: {snapshot}")
        try:
            subset = filter_observations(
                self.store, snapshot.time_position, snapshot.selected_taxon, self.half_window
            )
            markers = self.view_updater.apply(
                self._rendered, subset, full_replace=self._needs_full_replace
            )
        except Exception as e:
            self._failure_count += 1
            self._last_error = e
            if isinstance(e, RenderFailure) and not e.restored:
                self._forget_rendered()
            logger.error(f"Reactive cycle {self._cycle_count} failed for {snapshot}: {e}", exc_info=True)
            if self._on_failure is not None:
                self._on_failure(e)
            return

        self._needs_full_replace = False
        self._rendered = markers
        self._last_subset = subset
        self._last_snapshot = snapshot
        self._last_error = None
        if self._on_cycle is not None:
            self._on_cycle(snapshot, subset, markers)

    def _forget_rendered(self) -> None:
        logger.warning("Map contents unknown after a failed restore; next cycle redraws all markers")
        self._rendered = EMPTY_MARKERS
        self._last_subset = ()
        self._last_snapshot = None
        self._needs_full_replace = True

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def rendered(self) -> MarkerSet:
        """Marker set currently on the map (last successful cycle)."""
        return self._rendered

    @property
    def last_subset(self) -> Tuple[Observation, ...]:
        return self._last_subset

    @property
    def last_snapshot(self) -> Optional[InputSnapshot]:
        """Input snapshot the rendered view corresponds to."""
        return self._last_snapshot

    @property
    def last_error(self) -> Optional[Exception]:
        """Error of the most recent cycle, None if it succeeded."""
        return self._last_error

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def failure_count(self) -> int:
        return self._failure_count
