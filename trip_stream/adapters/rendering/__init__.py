"""Rendering adapters - Implementations of MapRendererPort.

Available implementations:
- FoliumItineraryRenderer: Folium-based interactive map rendering
"""

from .folium_adapter import FoliumItineraryRenderer

__all__ = ["FoliumItineraryRenderer"]
