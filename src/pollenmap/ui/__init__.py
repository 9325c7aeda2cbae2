"""UI components for the pollen explorer Shiny app."""

from pollenmap.ui.layout import create_app_ui
from pollenmap.ui.sidebar import create_sidebar

__all__ = ["create_app_ui", "create_sidebar"]
