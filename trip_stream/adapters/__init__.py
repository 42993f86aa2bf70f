"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Generative models (Gemini, canned replay)
- Itinerary storage (in-memory, MongoDB)
- Rendering engines (Folium)
"""
