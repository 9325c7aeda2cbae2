"""Shiny server components for the pollen explorer."""

from pollenmap.server.main import create_server, build_session
from pollenmap.server.reactive_state import ExplorerState

__all__ = ["create_server", "build_session", "ExplorerState"]
