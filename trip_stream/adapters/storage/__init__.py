"""Storage adapters - Implementations of ItineraryRepositoryPort.

Available implementations:
- InMemoryItineraryRepository: Process-local, thread-safe storage
- MongoItineraryRepository: MongoDB storage via pymongo
"""

from .memory_repository import InMemoryItineraryRepository
from .mongo_repository import MongoItineraryRepository

__all__ = ["InMemoryItineraryRepository", "MongoItineraryRepository"]
