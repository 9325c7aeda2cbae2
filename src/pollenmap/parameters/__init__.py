"""Parameters configuration module."""

from pollenmap.parameters.explorer_params import ExplorerParameters
from pollenmap.parameters.constants import ExplorerConstants

__all__ = ["ExplorerParameters", "ExplorerConstants"]
