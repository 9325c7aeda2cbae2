"""
POLLENMAP - Reactive pollen abundance explorer

Explore fossil pollen percentages through time on an interactive map.
A time-window slider and a taxon selector drive a reactive loop that
filters the dataset and incrementally redraws the map markers.
"""

__version__ = "0.1.0"

from pollenmap.data.record_store import RecordStore
from pollenmap.data.observation import Observation
from pollenmap.core.filter_engine import filter_observations
from pollenmap.core.input_state import InputState
from pollenmap.core.scheduler import ReactiveScheduler, SchedulerState
from pollenmap.view.view_updater import ViewUpdater, UpdateMode
from pollenmap.parameters import ExplorerParameters, ExplorerConstants
from pollenmap.exceptions import DataIntegrityError, InvalidInputError, RenderFailure

__all__ = [
    "RecordStore",
    "Observation",
    "filter_observations",
    "InputState",
    "ReactiveScheduler",
    "SchedulerState",
    "ViewUpdater",
    "UpdateMode",
    "ExplorerParameters",
    "ExplorerConstants",
    "DataIntegrityError",
    "InvalidInputError",
    "RenderFailure",
]
