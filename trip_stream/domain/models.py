"""Immutable domain models for Trip Stream.

All models are frozen dataclasses with slots. They have no external
dependencies and represent the itinerary a model response decodes into,
plus the result types produced by the decoder, validator and session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional
from urllib.parse import quote

if TYPE_CHECKING:
    from .errors import TripStreamError


SENTINEL = "---JSON_DATA---"

GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="
GOOGLE_SEARCH_URL = "https://www.google.com/search?q="


class LocationCategory(Enum):
    """Closed set of waypoint categories used to pick map markers.

    The model is asked for one of these labels in English, but it sometimes
    answers in the narrative language, so each category also knows its
    Thai label. Anything else maps to GENERIC.
    """

    TEMPLE = "temple"
    CAFE = "cafe"
    RESTAURANT = "restaurant"
    PARK = "park"
    HOTEL = "hotel"
    MALL = "mall"
    LANDMARK = "landmark"
    NATURE = "nature"
    MARKET = "market"
    GENERIC = "generic"

    @classmethod
    def from_label(cls, label: Optional[str]) -> LocationCategory:
        """Map a free-form type label onto a category."""
        if not label:
            return cls.GENERIC
        return _CATEGORY_ALIASES.get(label.strip().lower(), cls.GENERIC)


_CATEGORY_ALIASES: dict[str, LocationCategory] = {
    **{c.value: c for c in LocationCategory if c is not LocationCategory.GENERIC},
    "วัด": LocationCategory.TEMPLE,
    "คาเฟ่": LocationCategory.CAFE,
    "ร้านอาหาร": LocationCategory.RESTAURANT,
    "สวนสาธารณะ": LocationCategory.PARK,
    "โรงแรม": LocationCategory.HOTEL,
    "ห้างสรรพสินค้า": LocationCategory.MALL,
    "สถานที่สำคัญ": LocationCategory.LANDMARK,
    "ธรรมชาติ": LocationCategory.NATURE,
    "ตลาด": LocationCategory.MARKET,
}


@dataclass(frozen=True, slots=True)
class Location:
    """A single waypoint of an itinerary.

    Attributes:
        name: Name of the place, as written by the model
        lat: Latitude in degrees
        lng: Longitude in degrees
        day: Day of the trip the place belongs to (1-based), if known
        description: Short description for popups
        type: Raw type label, kept verbatim for display
    """

    name: str
    lat: float
    lng: float
    day: Optional[int] = None
    description: Optional[str] = None
    type: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.lat <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.lat}")
        if not -180 <= self.lng <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.lng}"
            )

    @property
    def category(self) -> LocationCategory:
        """Marker category derived from the raw type label."""
        return LocationCategory.from_label(self.type)

    def maps_url(self, destination: str = "") -> str:
        """Google Maps search link for this place."""
        return GOOGLE_MAPS_SEARCH_URL + quote(_query(self.name, destination), safe="")

    def search_url(self, destination: str = "") -> str:
        """Google web search link for this place."""
        return GOOGLE_SEARCH_URL + quote(_query(self.name, destination), safe="")

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "lat": self.lat, "lng": self.lng}
        if self.day is not None:
            data["day"] = self.day
        if self.description is not None:
            data["description"] = self.description
        if self.type is not None:
            data["type"] = self.type
        return data


def _query(name: str, destination: str) -> str:
    return f"{name} {destination}".strip()


@dataclass(frozen=True, slots=True)
class MapViewport:
    """Initial map position for an itinerary."""

    lat: float
    lng: float
    zoom: int = 12


@dataclass(frozen=True, slots=True)
class ItineraryPayload:
    """Validated structured part of a model response.

    Attributes:
        title: Trip title
        destination: Main destination
        duration: Free-form duration, e.g. "3 days"
        locations: Waypoints that passed validation, in model order
    """

    title: str
    destination: str
    duration: str
    locations: tuple[Location, ...] = field(default_factory=tuple)

    @property
    def days(self) -> tuple[int, ...]:
        """Distinct day numbers referenced by the locations, sorted."""
        return tuple(sorted({loc.day for loc in self.locations if loc.day is not None}))

    def locations_for_day(self, day: int) -> tuple[Location, ...]:
        return tuple(loc for loc in self.locations if loc.day == day)

    def initial_viewport(self) -> Optional[MapViewport]:
        """Center the map on the first waypoint, if any."""
        if not self.locations:
            return None
        first = self.locations[0]
        return MapViewport(lat=first.lat, lng=first.lng)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "destination": self.destination,
            "duration": self.duration,
            "locations": [loc.to_dict() for loc in self.locations],
        }


@dataclass(frozen=True, slots=True)
class LocationValidationWarning:
    """Non-fatal report of waypoints dropped during validation.

    Attributes:
        dropped_count: Number of entries removed from the payload
        reasons: One human-readable reason per dropped entry
    """

    dropped_count: int
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return f"{self.dropped_count} location(s) dropped"


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """An accepted payload, with a warning when some locations were dropped."""

    payload: ItineraryPayload
    warning: Optional[LocationValidationWarning] = None

    @property
    def is_partial(self) -> bool:
        return self.warning is not None


@dataclass(frozen=True, slots=True)
class DecodedStream:
    """Final output of the stream decoder.

    Attributes:
        narrative: Full narrative text, sentinel excluded
        trailer: Raw text after the sentinel, or None if it never appeared
    """

    narrative: str
    trailer: Optional[str] = None

    @property
    def sentinel_found(self) -> bool:
        return self.trailer is not None


class SessionState(Enum):
    """Lifecycle states of a stream session."""

    INIT = auto()
    STREAMING = auto()
    SENTINEL_FOUND = auto()
    COMPLETE = auto()
    COMPLETE_NO_PAYLOAD = auto()
    FAILED = auto()
    CANCELLED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        SessionState.COMPLETE,
        SessionState.COMPLETE_NO_PAYLOAD,
        SessionState.FAILED,
        SessionState.CANCELLED,
    }
)


@dataclass(frozen=True, slots=True)
class SessionResult:
    """Terminal result of a stream session.

    The narrative is always present (empty only for cancelled sessions or
    empty responses), whatever happened to the structured payload.

    Attributes:
        state: Terminal session state
        narrative: Narrative text produced by the model
        payload: Validated itinerary, if one was decoded
        warning: Dropped-locations warning accompanying the payload
        error: Transport or payload error for FAILED sessions
    """

    state: SessionState
    narrative: str = ""
    payload: Optional[ItineraryPayload] = None
    warning: Optional[LocationValidationWarning] = None
    error: Optional[TripStreamError] = None

    @property
    def is_success(self) -> bool:
        return self.state in (SessionState.COMPLETE, SessionState.COMPLETE_NO_PAYLOAD)

    @property
    def has_payload(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True, slots=True)
class TripPlan:
    """A completed trip as shown to the user: payload plus narrative."""

    payload: ItineraryPayload
    plan: str

    @classmethod
    def from_result(cls, result: SessionResult) -> Optional[TripPlan]:
        if result.payload is None:
            return None
        return cls(payload=result.payload, plan=result.narrative)

    def to_dict(self) -> dict:
        return {**self.payload.to_dict(), "plan": self.plan}


@dataclass(frozen=True, slots=True)
class SavedItinerary:
    """A trip as stored by an itinerary repository.

    Attributes:
        id: Repository-assigned identifier
        trip: The stored trip
        created_at: Time the trip was saved (UTC)
    """

    id: str
    trip: TripPlan
    created_at: datetime

    @property
    def payload(self) -> ItineraryPayload:
        return self.trip.payload
