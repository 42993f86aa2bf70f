"""Top-level package for the Trip Stream project.

Turns a free-text trip request into a streamed itinerary narrative and
a validated list of mappable waypoints. The model answers in a single
text stream; the decoding package splits it at the sentinel and the
services package drives one session per request.
"""

from .decoding import PayloadValidator, StreamDecoder, sanitize
from .domain import SENTINEL, ItineraryPayload, Location, SessionResult, SessionState
from .services import StreamSession, TripPlannerService

__all__ = [
    "SENTINEL",
    "ItineraryPayload",
    "Location",
    "PayloadValidator",
    "SessionResult",
    "SessionState",
    "StreamDecoder",
    "StreamSession",
    "TripPlannerService",
    "sanitize",
]

__version__ = "0.1.0"
