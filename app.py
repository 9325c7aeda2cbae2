"""
Pollen Explorer - Shiny Application Entry Point

Explore fossil pollen abundance through time on an ipyleaflet map.
Set POLLENMAP_DATA to a CSV with SiteName, Latitude, Longitude, Age, Taxon
and Pct columns to use a dataset other than the bundled sample.

Run with:  shiny run app.py
"""

import sys
import logging
from pathlib import Path

# Add src directory to path so the app runs from a plain checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from pollenmap.config import LOG_FORMAT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("POLLENMAP")

from shiny import App

from pollenmap.data.loader import get_default_store
from pollenmap.parameters import ExplorerParameters
from pollenmap.server.main import create_server
from pollenmap.ui.layout import create_app_ui

# Load once per process; a DataIntegrityError here stops the app
store = get_default_store()
params = ExplorerParameters()
logger.info(f"Loaded {store!r}")

app_ui = create_app_ui(store.known_taxa(), params)
app = App(app_ui, create_server(store, params))


if __name__ == "__main__":
    from shiny import run_app
    run_app(app)
