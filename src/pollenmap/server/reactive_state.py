"""
Centralized Reactive State for the pollen explorer Shiny app

Per-session reactive values mirrored from the scheduler for display.
"""

from dataclasses import dataclass, field
from typing import Optional

from shiny import reactive

from pollenmap.core.input_state import InputSnapshot


@dataclass
class ExplorerState:
    """
    Reactive state container for one explorer session.

    The scheduler owns the authoritative marker set; these values only feed
    the status outputs.
    """

    marker_count: reactive.Value = field(default_factory=lambda: reactive.Value(0))
    cycle_count: reactive.Value = field(default_factory=lambda: reactive.Value(0))
    snapshot: reactive.Value = field(default_factory=lambda: reactive.Value(None))
    last_error: reactive.Value = field(default_factory=lambda: reactive.Value(None))
    status_message: reactive.Value = field(default_factory=lambda: reactive.Value("Loading..."))

    def record_cycle(self, snapshot: InputSnapshot, marker_count: int) -> None:
        """Mirror a successful reactive cycle."""
        self.snapshot.set(snapshot)
        self.marker_count.set(marker_count)
        # Called from inside the sync effect; reading without isolate would
        # make that effect depend on its own output
        with reactive.isolate():
            cycles = self.cycle_count()
        self.cycle_count.set(cycles + 1)
        self.last_error.set(None)
        self.status_message.set(f"{marker_count} samples shown")

    def record_failure(self, message: Optional[str], marker_count: int) -> None:
        """Mirror a failed cycle; ``marker_count`` is what the map still shows."""
        self.last_error.set(message)
        self.marker_count.set(marker_count)
        self.status_message.set("Map not updated")
