"""
Sidebar component for the pollen explorer.
"""

from typing import Sequence

from shiny import ui

from pollenmap.parameters import ExplorerParameters


# Tooltips for sidebar controls
SIDEBAR_TOOLTIPS = {
    "time_position": "Centre of the time window in calibrated years before present (BP). "
                     "Samples within ± the half-window of this age are shown.",
    "taxon": "Pollen taxon to display. Only taxa reaching a meaningful abundance somewhere "
             "in the dataset are listed.",
}


def _label_with_tip(text: str, tip_key: str, input_id: str):
    return ui.tags.label(
        f"{text} ",
        ui.tags.span("ⓘ", title=SIDEBAR_TOOLTIPS[tip_key],
                     style="cursor: help; color: #0d6efd;"),
        **{"for": input_id}
    )


def create_sidebar(taxa: Sequence[str], params: ExplorerParameters = None):
    """Create the explorer sidebar with the time slider and taxon selector."""
    params = params or ExplorerParameters()
    taxa = list(taxa)
    selected = params.default_taxon if params.default_taxon in taxa else (taxa[0] if taxa else None)

    return ui.sidebar(
        ui.h5("🌲 Pollen Explorer", class_="mb-3"),

        ui.div(
            _label_with_tip("Time (yr BP)", "time_position", "time_position"),
            ui.input_slider(
                "time_position",
                None,
                min=params.time_min,
                max=params.time_max,
                value=params.initial_time,
                step=params.time_step,
                post=" yr BP",
                sep="",
            ),
            ui.p(f"Window: ± {params.half_window:g} years", class_="text-muted small mb-0"),
            class_="mb-3"
        ),

        ui.div(
            _label_with_tip("Taxon", "taxon", "taxon"),
            ui.input_select("taxon", None, choices=taxa, selected=selected),
            class_="mb-3"
        ),

        ui.tags.hr(),
        ui.output_ui("status_panel"),
        width=300
    )
