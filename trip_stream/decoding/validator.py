"""Validation of the structured trailer into an ItineraryPayload.

The validator is strict about the payload envelope and lenient about
individual waypoints: a broken envelope rejects the payload, while a
broken waypoint is dropped and reported in a warning.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from ..domain.errors import MalformedPayloadError, SchemaViolationError
from ..domain.models import (
    ItineraryPayload,
    Location,
    LocationValidationWarning,
    ValidationOutcome,
)

REQUIRED_TEXT_FIELDS = ("title", "destination", "duration")


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not coordinates
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return False


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass
class PayloadValidator:
    """Parses and validates a sanitized trailer.

    Attributes:
        required_fields: Top-level string fields the payload must carry
    """

    required_fields: tuple[str, ...] = REQUIRED_TEXT_FIELDS

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def validate(self, candidate: str) -> ValidationOutcome:
        """Turn a candidate JSON string into an itinerary.

        Args:
            candidate: Sanitized trailer text.

        Returns:
            ValidationOutcome with the accepted payload, and a warning when
            some locations were dropped.

        Raises:
            MalformedPayloadError: If the candidate is not valid JSON.
            SchemaViolationError: If a required field is missing or of the
                wrong type, or ``locations`` is not a list.
        """
        try:
            data = json.loads(candidate)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and over-long integer literals
            self._logger.warning(
                "Trailer is not valid JSON",
                extra={"error": str(e), "chars": len(candidate)},
            )
            raise MalformedPayloadError(
                "Trailer is not valid JSON", raw=candidate, cause=e
            ) from e

        if not isinstance(data, dict):
            raise SchemaViolationError(
                f"Payload must be a JSON object, got {type(data).__name__}",
                field_name="",
            )

        for name in self.required_fields:
            if name not in data:
                raise SchemaViolationError(
                    f"Missing required field '{name}'", field_name=name
                )
            if not isinstance(data[name], str):
                raise SchemaViolationError(
                    f"Field '{name}' must be a string", field_name=name
                )

        raw_locations = data.get("locations")
        if not isinstance(raw_locations, list):
            raise SchemaViolationError(
                "Field 'locations' must be a list", field_name="locations"
            )

        locations: list[Location] = []
        reasons: list[str] = []
        for index, entry in enumerate(raw_locations):
            location, reason = self.validate_location(entry)
            if location is None:
                reasons.append(f"locations[{index}]: {reason}")
                continue
            locations.append(location)

        payload = ItineraryPayload(
            title=data["title"],
            destination=data["destination"],
            duration=data["duration"],
            locations=tuple(locations),
        )

        warning = None
        if reasons:
            warning = LocationValidationWarning(
                dropped_count=len(reasons), reasons=tuple(reasons)
            )
            self._logger.warning(
                "Dropped invalid locations",
                extra={"dropped": len(reasons), "kept": len(locations)},
            )

        self._logger.debug(
            "Payload validated",
            extra={"title": payload.title, "locations": len(locations)},
        )
        return ValidationOutcome(payload=payload, warning=warning)

    def validate_location(self, entry: Any) -> tuple[Optional[Location], str]:
        """Validate one waypoint.

        Returns:
            ``(location, "")`` on success, ``(None, reason)`` otherwise.
        """
        if not isinstance(entry, dict):
            return None, "entry is not an object"

        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            return None, "missing or empty name"

        lat, lng = entry.get("lat"), entry.get("lng")
        if not _is_number(lat) or not _is_number(lng):
            return None, f"non-numeric coordinates for '{name}'"
        if not -90 <= lat <= 90:
            return None, f"latitude {lat} out of range for '{name}'"
        if not -180 <= lng <= 180:
            return None, f"longitude {lng} out of range for '{name}'"

        location = Location(
            name=name,
            lat=float(lat),
            lng=float(lng),
            day=_positive_int(entry.get("day")),
            description=_optional_text(entry.get("description")),
            type=_optional_text(entry.get("type")),
        )
        return location, ""


def validate(candidate: str) -> ValidationOutcome:
    """Validate a sanitized trailer with the default validator."""
    return PayloadValidator().validate(candidate)
