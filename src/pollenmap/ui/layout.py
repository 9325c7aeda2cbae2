"""
Main UI Layout for the pollen explorer.
"""

from typing import Sequence

from shiny import ui
from shinywidgets import output_widget
import shinyswatch

from pollenmap.parameters import ExplorerParameters
from pollenmap.ui.sidebar import create_sidebar


# Custom CSS for styling
CUSTOM_CSS = """
/* Card improvements */
.card { box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.card-header { font-weight: 600; background-color: #f8f9fa; }

/* Sidebar styling */
.sidebar { background-color: #f8f9fa; }

/* Error display */
.shiny-output-error { color: #dc3545; }
.shiny-output-error:before { content: '⚠ '; }
"""


def create_app_ui(taxa: Sequence[str], params: ExplorerParameters = None):
    """Create the main application UI."""
    params = params or ExplorerParameters()
    return ui.page_sidebar(
        create_sidebar(taxa, params),
        ui.tags.style(CUSTOM_CSS),
        ui.card(
            ui.card_header("Pollen abundance through time"),
            output_widget("pollen_map"),
            full_screen=True,
        ),
        title="Pollen Explorer",
        theme=shinyswatch.theme.flatly,
        fillable=True
    )
