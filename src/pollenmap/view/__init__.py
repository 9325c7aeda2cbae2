"""Map widget adapter and marker view updates."""

from pollenmap.view.map_widget import MapWidget, LeafletMarkerMap
from pollenmap.view.view_updater import (
    EMPTY_MARKERS,
    Marker,
    MarkerSet,
    UpdateMode,
    ViewUpdater,
    markers_for,
)

__all__ = [
    "MapWidget",
    "LeafletMarkerMap",
    "EMPTY_MARKERS",
    "Marker",
    "MarkerSet",
    "UpdateMode",
    "ViewUpdater",
    "markers_for",
]
