"""
Filter engine.

Pure mapping from (time position, taxon) to the matching observations,
using the record store's per-taxon age index instead of a full scan.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from pollenmap.data.observation import Observation
from pollenmap.data.record_store import RecordStore


def window_bounds(time_position: float, half_window: float) -> Tuple[float, float]:
    """
    Inclusive age bounds of the window centred on ``time_position``.

    Raises:
        ValueError: If half_window is negative or either value is not finite
    """
    if not math.isfinite(half_window) or half_window < 0:
        raise ValueError(f"half_window must be a finite, non-negative number (got {half_window!r})")
    if not math.isfinite(time_position):
        raise ValueError(f"time_position must be finite (got {time_position!r})")
    return time_position - half_window, time_position + half_window


def filter_observations(
    store: RecordStore,
    time_position: float,
    selected_taxon: str,
    half_window: float,
) -> Tuple[Observation, ...]:
    """
    Select observations of one taxon whose age lies within the time window.

    Predicate: ``taxon == selected_taxon`` and
    ``time_position - half_window <= age <= time_position + half_window``.

    Args:
        store: Record store to query
        time_position: Centre of the window (years before present)
        selected_taxon: Taxon label
        half_window: Symmetric tolerance around time_position

    Returns:
        Matching observations ordered by (age, index). Empty for an
        unknown taxon.
    """
    low, high = window_bounds(time_position, half_window)
    index = store.taxon_index(selected_taxon)
    if index is None or len(index) == 0:
        return ()

    start = int(np.searchsorted(index.ages, low, side="left"))
    stop = int(np.searchsorted(index.ages, high, side="right"))
    observations = store.observations()
    return tuple(observations[p] for p in index.positions[start:stop])
