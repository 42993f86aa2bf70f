"""Thread-safe in-memory itinerary repository.

Default storage backend: keeps saved trips for the lifetime of the
process, which is enough for the CLI and for tests.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ...domain.models import SavedItinerary, TripPlan


@dataclass
class InMemoryItineraryRepository:
    """In-memory implementation of ItineraryRepositoryPort.

    Trips are listed most recent first. Identifiers are random hex
    strings.

    Attributes:
        max_size: Maximum number of stored trips (None = unlimited);
            the oldest trip is evicted first
        name: Repository name for logging
    """

    max_size: Optional[int] = None
    name: str = "memory"

    _store: Dict[str, SavedItinerary] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"repository.{self.name}")

    def save(self, trip: TripPlan) -> str:
        """Store a trip and return its identifier."""
        with self._lock:
            if self.max_size is not None and len(self._store) >= self.max_size:
                oldest_id = next(iter(self._store))
                del self._store[oldest_id]
                self._logger.debug(
                    "Repository evicted trip",
                    extra={"trip_id": oldest_id, "reason": "max_size"},
                )

            identifier = uuid.uuid4().hex
            self._store[identifier] = SavedItinerary(
                id=identifier,
                trip=trip,
                created_at=datetime.now(timezone.utc),
            )
            self._logger.info(
                "Trip saved",
                extra={"trip_id": identifier, "title": trip.payload.title},
            )
            return identifier

    def get(self, identifier: str) -> Optional[SavedItinerary]:
        with self._lock:
            return self._store.get(identifier)

    def list(self) -> list[SavedItinerary]:
        """Return stored trips, most recent first."""
        with self._lock:
            return list(reversed(self._store.values()))

    def delete_by_id(self, identifier: str) -> bool:
        """Delete a trip; returns False if the identifier is unknown."""
        with self._lock:
            if identifier in self._store:
                del self._store[identifier]
                self._logger.info("Trip deleted", extra={"trip_id": identifier})
                return True
            return False

    def clear(self) -> int:
        """Remove all trips and return how many were stored."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
            return count

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"size": len(self._store), "max_size": self.max_size}
