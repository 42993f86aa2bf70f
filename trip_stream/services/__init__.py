"""Services layer - Application orchestration.

Available services:
- StreamSession: Per-request state machine decoding one model response
- TripPlannerService: Main service tying provider, session, storage and maps
"""

from .stream_session import StreamSession
from .trip_planner import TripPlannerService

__all__ = ["StreamSession", "TripPlannerService"]
