"""MongoDB itinerary repository.

Stores one document per trip:

    {"title", "destination", "duration", "plan",
     "locations": [{"name", "lat", "lng", "day"?, "description"?, "type"?}],
     "createdAt"}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ...config import StorageConfig, get_config
from ...domain.errors import PersistenceError
from ...domain.models import ItineraryPayload, Location, SavedItinerary, TripPlan


def trip_to_document(trip: TripPlan, created_at: datetime) -> dict[str, Any]:
    return {**trip.to_dict(), "createdAt": created_at}


def document_to_saved(doc: Mapping[str, Any]) -> SavedItinerary:
    locations = tuple(
        Location(
            name=loc["name"],
            lat=float(loc["lat"]),
            lng=float(loc["lng"]),
            day=loc.get("day"),
            description=loc.get("description"),
            type=loc.get("type"),
        )
        for loc in doc.get("locations", [])
    )
    payload = ItineraryPayload(
        title=doc["title"],
        destination=doc["destination"],
        duration=doc["duration"],
        locations=locations,
    )
    return SavedItinerary(
        id=str(doc["_id"]),
        trip=TripPlan(payload=payload, plan=doc.get("plan", "")),
        created_at=doc["createdAt"],
    )


@dataclass
class MongoItineraryRepository:
    """pymongo implementation of ItineraryRepositoryPort.

    The client is created lazily unless a collection is injected.

    Attributes:
        config: Storage configuration (URI, database, collection)
        collection: Optional pre-built collection (tests, shared clients)
    """

    config: StorageConfig = field(default_factory=lambda: get_config().storage)
    collection: Optional[Collection] = field(default=None, repr=False)

    _client: Optional[MongoClient] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_collection(self) -> Collection:
        if self.collection is not None:
            return self.collection

        self._logger.debug(
            "Connecting to MongoDB",
            extra={"database": self.config.database, "collection": self.config.collection},
        )
        self._client = MongoClient(
            self.config.mongo_uri,
            serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
        )
        self.collection = self._client[self.config.database][self.config.collection]
        return self.collection

    def _error(self, operation: str, e: Exception) -> PersistenceError:
        self._logger.error(
            "MongoDB operation failed",
            extra={"operation": operation, "error": str(e)},
        )
        return PersistenceError(
            f"MongoDB {operation} failed",
            operation=operation,
            backend="mongo",
            cause=e,
        )

    def check_connection(self) -> bool:
        """Ping the server; False if it is unreachable."""
        try:
            self._get_collection().database.client.admin.command("ping")
            return True
        except PyMongoError as e:
            self._logger.warning("MongoDB ping failed", extra={"error": str(e)})
            return False

    def save(self, trip: TripPlan) -> str:
        document = trip_to_document(trip, datetime.now(timezone.utc))
        try:
            result = self._get_collection().insert_one(document)
        except PyMongoError as e:
            raise self._error("save", e) from e
        identifier = str(result.inserted_id)
        self._logger.info(
            "Trip saved",
            extra={"trip_id": identifier, "title": trip.payload.title},
        )
        return identifier

    def get(self, identifier: str) -> Optional[SavedItinerary]:
        try:
            oid = ObjectId(identifier)
        except (InvalidId, TypeError):
            return None
        try:
            doc = self._get_collection().find_one({"_id": oid})
        except PyMongoError as e:
            raise self._error("get", e) from e
        return document_to_saved(doc) if doc is not None else None

    def list(self) -> list[SavedItinerary]:
        """Return stored trips, most recent first."""
        try:
            docs = list(self._get_collection().find({}).sort("createdAt", DESCENDING))
        except PyMongoError as e:
            raise self._error("list", e) from e
        return [document_to_saved(doc) for doc in docs]

    def delete_by_id(self, identifier: str) -> bool:
        try:
            oid = ObjectId(identifier)
        except (InvalidId, TypeError):
            self._logger.debug("Invalid trip id", extra={"trip_id": identifier})
            return False
        try:
            result = self._get_collection().delete_one({"_id": oid})
        except PyMongoError as e:
            raise self._error("delete", e) from e
        deleted = result.deleted_count == 1
        if deleted:
            self._logger.info("Trip deleted", extra={"trip_id": identifier})
        return deleted
