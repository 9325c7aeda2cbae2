"""Custom exception hierarchy for pollenmap."""

from __future__ import annotations

from typing import Any


class PollenMapError(Exception):
    """Base exception for all pollenmap errors."""


class DataIntegrityError(PollenMapError):
    """Dataset is malformed or unusable. Raised at load time; the session cannot start."""


class InvalidInputError(PollenMapError):
    """A control reported a value outside its declared domain."""

    def __init__(self, message: str, *, field: str = "", value: Any = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class RenderFailure(PollenMapError):
    """
    The map widget rejected a marker update.

    ``restored`` is False when the previous markers could not be put back
    either, so the widget's marker set is unknown.
    """

    def __init__(self, message: str, *, restored: bool = True) -> None:
        self.restored = restored
        super().__init__(message)
