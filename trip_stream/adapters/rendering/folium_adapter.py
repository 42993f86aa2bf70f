"""Folium map renderer adapter.

Draws an itinerary's waypoints as category-specific markers linked by
a route line, centred on the first waypoint.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...domain.errors import RenderingError
from ...domain.models import ItineraryPayload, Location, LocationCategory

# (Font Awesome 4 icon, marker color)
CATEGORY_MARKERS: dict[LocationCategory, tuple[str, str]] = {
    LocationCategory.TEMPLE: ("bell", "orange"),
    LocationCategory.CAFE: ("coffee", "beige"),
    LocationCategory.RESTAURANT: ("cutlery", "red"),
    LocationCategory.PARK: ("tree", "green"),
    LocationCategory.HOTEL: ("bed", "darkblue"),
    LocationCategory.MALL: ("shopping-bag", "purple"),
    LocationCategory.LANDMARK: ("university", "cadetblue"),
    LocationCategory.NATURE: ("leaf", "darkgreen"),
    LocationCategory.MARKET: ("shopping-basket", "pink"),
    LocationCategory.GENERIC: ("map-marker", "blue"),
}


def marker_style(location: Location) -> tuple[str, str]:
    """Icon and color for a waypoint; unknown types use the generic marker."""
    return CATEGORY_MARKERS.get(location.category, CATEGORY_MARKERS[LocationCategory.GENERIC])


def popup_html(location: Location, destination: str) -> str:
    parts = [f"<b>{html.escape(location.name)}</b>"]
    if location.day is not None:
        parts.append(f"Day {location.day}")
    if location.type:
        parts.append(html.escape(location.type))
    if location.description:
        parts.append(html.escape(location.description))
    parts.append(
        f'<a href="{html.escape(location.maps_url(destination))}" target="_blank">'
        "Google Maps</a>"
    )
    return "<br>".join(parts)


@dataclass
class FoliumItineraryRenderer:
    """Folium-based interactive map renderer.

    This adapter implements MapRendererPort using Folium for
    generating interactive HTML maps.

    Attributes:
        route_color: Color of the line joining consecutive waypoints
    """

    route_color: str = "blue"

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def build_map(self, payload: ItineraryPayload) -> Any:
        """Build the folium.Map for a payload.

        Raises:
            RenderingError: If the payload has no locations or Folium is
                not installed.
        """
        viewport = payload.initial_viewport()
        if viewport is None:
            raise RenderingError(
                "Cannot render an itinerary without locations",
                renderer_type="folium",
            )

        try:
            import folium
        except ImportError as e:
            raise RenderingError(
                "Folium not installed", renderer_type="folium", cause=e
            )

        m = folium.Map(location=[viewport.lat, viewport.lng], zoom_start=viewport.zoom)

        for location in payload.locations:
            icon, color = marker_style(location)
            folium.Marker(
                location=[location.lat, location.lng],
                popup=folium.Popup(popup_html(location, payload.destination), max_width=300),
                tooltip=location.name,
                icon=folium.Icon(color=color, icon=icon, prefix="fa"),
            ).add_to(m)

        if len(payload.locations) >= 2:
            folium.PolyLine(
                [[loc.lat, loc.lng] for loc in payload.locations],
                weight=3,
                color=self.route_color,
                opacity=0.8,
            ).add_to(m)

        return m

    def render_html(self, payload: ItineraryPayload) -> str:
        """Render the map as a standalone HTML document."""
        try:
            return self.build_map(payload).get_root().render()
        except RenderingError:
            raise
        except Exception as e:
            raise RenderingError(
                f"Map rendering failed: {e}", renderer_type="folium", cause=e
            )

    def render(self, payload: ItineraryPayload, output_path: Path) -> Path:
        """Render the itinerary on a map and save to file.

        Raises:
            RenderingError: If rendering fails.
        """
        self._logger.info(
            "Rendering itinerary map",
            extra={
                "locations": len(payload.locations),
                "output_path": str(output_path),
            },
        )

        try:
            m = self.build_map(payload)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            m.save(str(output_path))
        except RenderingError as e:
            e.output_path = str(output_path)
            raise
        except Exception as e:
            self._logger.error(
                "Map rendering failed",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Map rendering failed: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )

        self._logger.info(
            "Map rendered successfully",
            extra={"output_path": str(output_path)},
        )
        return output_path
