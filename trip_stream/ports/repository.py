"""Itinerary repository port - Persistence of completed trips.

Persistence is not coupled to decoding: a session can complete and its
trip can independently fail to save.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import SavedItinerary, TripPlan


class ItineraryRepositoryPort(Protocol):
    """Port for itinerary storage.

    Implementations:
    - adapters/storage/memory_repository.py (InMemoryItineraryRepository)
    - adapters/storage/mongo_repository.py (MongoItineraryRepository)
    """

    def save(self, trip: TripPlan) -> str:
        """Store a trip.

        Args:
            trip: Validated payload plus its narrative.

        Returns:
            The identifier assigned to the stored trip.

        Raises:
            PersistenceError: If the backend rejects the write.
        """
        ...

    def get(self, identifier: str) -> Optional[SavedItinerary]:
        """Fetch one stored trip, or None if unknown."""
        ...

    def list(self) -> list[SavedItinerary]:
        """Return all stored trips, most recent first."""
        ...

    def delete_by_id(self, identifier: str) -> bool:
        """Delete a stored trip.

        Returns:
            True if a trip was deleted, False if the identifier is unknown.
        """
        ...
