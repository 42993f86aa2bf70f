"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
adapters. They enable dependency injection and make the system testable.

This module follows the Hexagonal Architecture pattern:
- Input ports: How the application is driven (services)
- Output ports: How the application drives external systems (adapters)
"""

from .model_provider import ModelProviderPort
from .rendering import MapRendererPort
from .repository import ItineraryRepositoryPort

__all__ = [
    # Generation
    "ModelProviderPort",
    # Persistence
    "ItineraryRepositoryPort",
    # Rendering
    "MapRendererPort",
]
