"""Reactive core: filter engine, input state and scheduler."""

from pollenmap.core.filter_engine import filter_observations, window_bounds
from pollenmap.core.input_state import InputSnapshot, InputState
from pollenmap.core.scheduler import ReactiveScheduler, SchedulerState

__all__ = [
    "filter_observations",
    "window_bounds",
    "InputSnapshot",
    "InputState",
    "ReactiveScheduler",
    "SchedulerState",
]
