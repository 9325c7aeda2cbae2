"""
Map widget collaborators.

Defines the marker interface the view updater talks to and an ipyleaflet
implementation that keeps all reactive markers in one LayerGroup.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, Optional, Protocol, Tuple

from ipyleaflet import CircleMarker, LayerGroup, Map, basemaps

from pollenmap.parameters import ExplorerParameters

logger = logging.getLogger("POLLENMAP")


class MapWidget(Protocol):
    """Marker operations used by the view updater."""

    supports_keyed_removal: bool

    def add_marker(self, lat: float, lng: float, intensity: float,
                   key: Optional[Hashable] = None) -> None: ...

    def remove_marker(self, key: Hashable) -> None: ...

    def clear_markers(self) -> None: ...

    def set_view(self, lat: float, lng: float, zoom: int) -> None: ...

    def batch(self): ...


class LeafletMarkerMap:
    """
    ipyleaflet map with a single LayerGroup of reactive CircleMarkers.

    Marker changes made inside ``batch()`` are pushed to the front end as one
    ``layers`` assignment, so the browser never sees a half-applied update.
    """

    supports_keyed_removal = True

    def __init__(self, params: Optional[ExplorerParameters] = None, map_widget: Optional[Map] = None):
        self.params = params or ExplorerParameters()
        if map_widget is None:
            map_widget = Map(
                center=self.params.map_center,
                zoom=self.params.map_zoom,
                basemap=basemaps.Esri.WorldTopoMap,
                scroll_wheel_zoom=True,
            )
        self.map = map_widget
        self.layer_group = LayerGroup(name="Pollen observations")
        self.map.add(self.layer_group)

        self._markers: Dict[Hashable, CircleMarker] = {}
        self._next_key = 0
        self._batch_depth = 0

    def _make_marker(self, lat: float, lng: float, intensity: float) -> CircleMarker:
        # No popup: these markers are rebuilt on every reactive cycle
        return CircleMarker(
            location=(lat, lng),
            radius=self.params.marker_radius,
            stroke=False,
            fill=True,
            fill_color=self.params.marker_color,
            fill_opacity=intensity,
        )

    def _sync(self) -> None:
        if self._batch_depth == 0:
            self.layer_group.layers = tuple(self._markers.values())

    @contextmanager
    def batch(self) -> Iterator[None]:
        """
        Defer front-end sync until the outermost batch exits.

        If the block raises, nothing is synced; the caller is expected to
        restore a consistent marker set in a new batch.
        """
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        self._sync()

    def add_marker(self, lat: float, lng: float, intensity: float,
                   key: Optional[Hashable] = None) -> None:
        if key is None:
            key = ("auto", self._next_key)
            self._next_key += 1
        if key in self._markers:
            raise KeyError(f"Marker {key!r} already on map")
        self._markers[key] = self._make_marker(lat, lng, intensity)
        self._sync()

    def remove_marker(self, key: Hashable) -> None:
        del self._markers[key]
        self._sync()

    def clear_markers(self) -> None:
        self._markers.clear()
        self._sync()

    def set_view(self, lat: float, lng: float, zoom: int) -> None:
        self.map.center = (lat, lng)
        self.map.zoom = zoom

    @property
    def marker_count(self) -> int:
        return len(self._markers)

    def marker_locations(self) -> Tuple[Tuple[float, float], ...]:
        """Locations of markers currently in the layer group."""
        return tuple(tuple(m.location) for m in self.layer_group.layers)
