"""Rendering port - Abstraction for itinerary map generation.

This protocol defines the contract for map rendering, allowing
different implementations (Folium, Plotly, etc.) to be used.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import ItineraryPayload


class MapRendererPort(Protocol):
    """Port for map rendering.

    Implementation: adapters/rendering/folium_adapter.py

    Map renderers place an itinerary's waypoints on an interactive map,
    choosing a marker per location category.
    """

    def render(self, payload: ItineraryPayload, output_path: Path) -> Path:
        """Render the itinerary on a map and save to file.

        Args:
            payload: Validated itinerary whose locations are drawn.
            output_path: Where to save the rendered map.

        Returns:
            Path to the generated map file.
        """
        ...

    def render_html(self, payload: ItineraryPayload) -> str:
        """Render the itinerary map as a standalone HTML document."""
        ...
