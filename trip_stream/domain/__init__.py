"""Domain layer - Core itinerary models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    DecoderStateError,
    MalformedPayloadError,
    PayloadError,
    PersistenceError,
    RenderingError,
    SchemaViolationError,
    TransportError,
    TripStreamError,
)
from .models import (
    SENTINEL,
    DecodedStream,
    ItineraryPayload,
    Location,
    LocationCategory,
    LocationValidationWarning,
    MapViewport,
    SavedItinerary,
    SessionResult,
    SessionState,
    TripPlan,
    ValidationOutcome,
)

__all__ = [
    # Models
    "SENTINEL",
    "Location",
    "LocationCategory",
    "ItineraryPayload",
    "MapViewport",
    "LocationValidationWarning",
    "ValidationOutcome",
    "DecodedStream",
    "SessionState",
    "SessionResult",
    "TripPlan",
    "SavedItinerary",
    # Errors
    "TripStreamError",
    "TransportError",
    "PayloadError",
    "MalformedPayloadError",
    "SchemaViolationError",
    "DecoderStateError",
    "PersistenceError",
    "ConfigurationError",
    "RenderingError",
]
