"""
Explorer parameters configuration.

All tunable values of the pollen explorer with their defaults and validation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from pollenmap.parameters.constants import ExplorerConstants


@dataclass
class ExplorerParameters:
    """
    Explorer parameters with defaults from ExplorerConstants.
    """

    # === Time slider ===
    time_min: float = ExplorerConstants.TIME_MIN
    time_max: float = ExplorerConstants.TIME_MAX
    time_step: float = ExplorerConstants.TIME_STEP
    time_default: Optional[float] = None    # None = time_min

    # === Filtering ===
    half_window: float = ExplorerConstants.HALF_WINDOW
    abundance_threshold: float = ExplorerConstants.ABUNDANCE_THRESHOLD
    default_taxon: Optional[str] = None     # None = first known taxon

    # === Map ===
    map_center: Tuple[float, float] = field(default_factory=lambda: ExplorerConstants.MAP_CENTER)
    map_zoom: int = ExplorerConstants.MAP_ZOOM
    marker_radius: int = ExplorerConstants.MARKER_RADIUS
    marker_color: str = ExplorerConstants.MARKER_COLOR

    # "replace" clears and re-adds every marker; "keyed" adds/removes by observation key
    update_mode: str = "replace"

    def __post_init__(self):
        self.validate()

    @property
    def initial_time(self) -> float:
        """Slider value at session start."""
        return self.time_min if self.time_default is None else self.time_default

    def validate(self) -> None:
        """
        Check parameter consistency.

        Raises:
            ValueError: If any parameter is out of its allowed range
        """
        for name in ("time_min", "time_max", "time_step", "half_window", "abundance_threshold"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")
        if self.time_min >= self.time_max:
            raise ValueError(f"time_min ({self.time_min}) must be below time_max ({self.time_max})")
        if self.time_step <= 0:
            raise ValueError("time_step must be positive")
        if self.half_window < 0:
            raise ValueError("half_window must not be negative")
        if not self.time_min <= self.initial_time <= self.time_max:
            raise ValueError(f"time_default {self.time_default} outside [{self.time_min}, {self.time_max}]")
        if self.update_mode not in ("replace", "keyed"):
            raise ValueError(f"Unknown update_mode: {self.update_mode!r}")
        if self.marker_radius < 1:
            raise ValueError("marker_radius must be at least 1")
