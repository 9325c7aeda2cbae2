"""
Input state for the two explorer controls.

Holds the current time position and selected taxon, rejects values outside
their declared domains and notifies listeners only on actual changes.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from pollenmap.exceptions import InvalidInputError

logger = logging.getLogger("POLLENMAP")

TIME_POSITION = "time_position"
SELECTED_TAXON = "selected_taxon"
FIELDS = (TIME_POSITION, SELECTED_TAXON)


class InputSnapshot(NamedTuple):
    """Immutable view of both controls at one point in time."""
    time_position: float
    selected_taxon: str


class InputState:
    """
    Current values of the time slider and taxon selector.

    Setters return True when the value changed. No-op writes neither bump
    ``version`` nor notify subscribers.
    """

    def __init__(
        self,
        taxa: Iterable[str],
        time_min: float,
        time_max: float,
        time_position: Optional[float] = None,
        selected_taxon: Optional[str] = None,
    ):
        self._taxa: Tuple[str, ...] = tuple(taxa)
        if not self._taxa:
            raise InvalidInputError("Taxon set must not be empty", field=SELECTED_TAXON)
        if not time_min < time_max:
            raise ValueError(f"time_min ({time_min}) must be below time_max ({time_max})")
        self._time_min = float(time_min)
        self._time_max = float(time_max)
        self._taxon_set = frozenset(self._taxa)

        self._time_position = self._validate_time(time_min if time_position is None else time_position)
        if selected_taxon is None or selected_taxon not in self._taxon_set:
            if selected_taxon is not None:
                logger.warning(f"Default taxon {selected_taxon!r} not available, using {self._taxa[0]!r}")
            selected_taxon = self._taxa[0]
        self._selected_taxon = selected_taxon

        self._version = 0
        self._listeners: List[Tuple[frozenset, Callable[[str], None]]] = []

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_time(self, value) -> float:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"time_position must be a number (got {value!r})",
                                    field=TIME_POSITION, value=value)
        value = float(value)
        if not math.isfinite(value) or not self._time_min <= value <= self._time_max:
            raise InvalidInputError(
                f"time_position {value} outside [{self._time_min}, {self._time_max}]",
                field=TIME_POSITION, value=value,
            )
        return value

    def _validate_taxon(self, label) -> str:
        if not isinstance(label, str) or label not in self._taxon_set:
            raise InvalidInputError(f"Unknown taxon: {label!r}", field=SELECTED_TAXON, value=label)
        return label

    # =========================================================================
    # Setters
    # =========================================================================

    def set_time(self, value) -> bool:
        """
        Set the time position.

        Returns:
            True if the stored value changed

        Raises:
            InvalidInputError: If value is not a finite number within range
        """
        value = self._validate_time(value)
        if value == self._time_position:
            return False
        self._time_position = value
        self._changed(TIME_POSITION)
        return True

    def set_taxon(self, label) -> bool:
        """
        Set the selected taxon.

        Returns:
            True if the stored value changed

        Raises:
            InvalidInputError: If label is not a known taxon
        """
        label = self._validate_taxon(label)
        if label == self._selected_taxon:
            return False
        self._selected_taxon = label
        self._changed(SELECTED_TAXON)
        return True

    def _changed(self, field: str) -> None:
        self._version += 1
        for fields, callback in list(self._listeners):
            if field in fields:
                callback(field)

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, fields: Iterable[str], callback: Callable[[str], None]) -> Callable[[], None]:
        """
        Register a callback for changes of the given fields.

        Returns:
            A function that removes the subscription
        """
        fields = frozenset(fields)
        unknown = fields - set(FIELDS)
        if unknown:
            raise ValueError(f"Unknown input fields: {sorted(unknown)}")
        entry = (fields, callback)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    # =========================================================================
    # Accessors
    # =========================================================================

    def current(self) -> InputSnapshot:
        """Both control values as one snapshot."""
        return InputSnapshot(self._time_position, self._selected_taxon)

    @property
    def time_position(self) -> float:
        return self._time_position

    @property
    def selected_taxon(self) -> str:
        return self._selected_taxon

    @property
    def taxa(self) -> Tuple[str, ...]:
        return self._taxa

    @property
    def time_range(self) -> Tuple[float, float]:
        return (self._time_min, self._time_max)

    @property
    def version(self) -> int:
        """Incremented on every actual change."""
        return self._version
