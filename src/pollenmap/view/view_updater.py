"""
View updater.

Translates a filtered subset into marker operations on the map widget and
tracks the rendered marker set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from pollenmap.data.observation import Observation
from pollenmap.exceptions import RenderFailure
from pollenmap.view.map_widget import MapWidget

logger = logging.getLogger("POLLENMAP")


class UpdateMode(Enum):
    """
    How a new subset is applied to the widget.

    REPLACE: clear all markers, then add every marker of the subset
    KEYED: remove vanished keys and add new ones (needs per-key removal)
    """
    REPLACE = "replace"
    KEYED = "keyed"


@dataclass(frozen=True)
class Marker:
    """A marker materialized on the map, keyed by observation index."""
    key: int
    latitude: float
    longitude: float
    intensity: float

    @classmethod
    def from_observation(cls, obs: Observation) -> "Marker":
        return cls(obs.index, obs.latitude, obs.longitude, obs.intensity)


MarkerSet = Mapping[int, Marker]

EMPTY_MARKERS: MarkerSet = MappingProxyType({})


def markers_for(subset: Iterable[Observation]) -> MarkerSet:
    """Marker set for a subset, keyed by observation index."""
    return MappingProxyType({obs.index: Marker.from_observation(obs) for obs in subset})


class ViewUpdater:
    """
    Applies filtered subsets to a map widget.

    ``apply`` never returns a partially applied marker set: if the widget
    raises, the previous markers are restored on the widget (best effort)
    and RenderFailure is raised, flagged with whether the restore worked.
    """

    def __init__(self, widget: MapWidget, mode: UpdateMode = UpdateMode.REPLACE):
        if isinstance(mode, str):
            mode = UpdateMode(mode)
        if mode is UpdateMode.KEYED and not getattr(widget, "supports_keyed_removal", False):
            raise ValueError("KEYED mode requires a widget with per-marker removal")
        self.widget = widget
        self.mode = mode

    def apply(self, previous_markers: MarkerSet, new_subset: Iterable[Observation],
              full_replace: bool = False) -> MarkerSet:
        """
        Update the widget from ``previous_markers`` to ``new_subset``.

        Args:
            previous_markers: Marker set currently on the widget
            new_subset: Observations to display
            full_replace: Clear and redraw even in KEYED mode, for when the
                widget contents are no longer known

        Returns:
            The new rendered marker set

        Raises:
            RenderFailure: If the widget rejected an operation. Its
                ``restored`` flag tells whether the previous markers are back
        """
        updated = markers_for(new_subset)
        try:
            with self.widget.batch():
                if self.mode is UpdateMode.KEYED and not full_replace:
                    self._apply_keyed(previous_markers, updated)
                else:
                    self._apply_replace(updated)
        except Exception as e:
            logger.warning(f"Map widget rejected update ({e}); restoring previous markers")
            restored = self._restore(previous_markers)
            raise RenderFailure(f"Map update failed: {e}", restored=restored) from e

        logger.debug(f"View updated ({self.mode.value}): {len(previous_markers)} -> {len(updated)} markers")
        return updated

    def _apply_replace(self, updated: MarkerSet) -> None:
        self.widget.clear_markers()
        for marker in updated.values():
            self.widget.add_marker(marker.latitude, marker.longitude, marker.intensity, key=marker.key)

    def _apply_keyed(self, previous: MarkerSet, updated: MarkerSet) -> None:
        for key in previous.keys() - updated.keys():
            self.widget.remove_marker(key)
        for key, marker in updated.items():
            if key not in previous:
                self.widget.add_marker(marker.latitude, marker.longitude, marker.intensity, key=key)

    def _restore(self, previous: MarkerSet) -> bool:
        try:
            with self.widget.batch():
                self._apply_replace(previous)
        except Exception as e:
            logger.error(f"Could not restore previous markers: {e}", exc_info=True)
            return False
        return True
