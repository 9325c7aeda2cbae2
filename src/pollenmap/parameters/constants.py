"""
Explorer constants.

Fixed values shared by the loader, the reactive core and the UI.
"""

from __future__ import annotations


class ExplorerConstants:
    """
    Fixed explorer constants.

    Column names follow the source pollen CSV export.
    """

    # Dataset columns
    COL_SITE: str = "SiteName"
    COL_LATITUDE: str = "Latitude"
    COL_LONGITUDE: str = "Longitude"
    COL_AGE: str = "Age"
    COL_TAXON: str = "Taxon"
    COL_PCT: str = "Pct"
    REQUIRED_COLUMNS: tuple = (COL_SITE, COL_LATITUDE, COL_LONGITUDE, COL_AGE, COL_TAXON, COL_PCT)
    NUMERIC_COLUMNS: tuple = (COL_LATITUDE, COL_LONGITUDE, COL_AGE, COL_PCT)

    # Time slider (years before present)
    TIME_MIN: float = -50.0
    TIME_MAX: float = 15000.0
    TIME_STEP: float = 500.0

    # Ages within +/- HALF_WINDOW of the slider value are shown
    HALF_WINDOW: float = 250.0

    # A taxon is selectable only if its maximum Pct exceeds this
    ABUNDANCE_THRESHOLD: float = 10.0

    PCT_MIN: float = 0.0
    PCT_MAX: float = 100.0

    # Initial map view (North America)
    MAP_CENTER: tuple = (50.0, -100.0)
    MAP_ZOOM: int = 3

    # Reactive marker style
    MARKER_RADIUS: int = 4
    MARKER_COLOR: str = "#1b7837"
