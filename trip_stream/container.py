"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import AppConfig, get_config

T = TypeVar("T")


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        planner = container.resolve(TripPlannerService)

        # Testing
        container = Container()
        container.register(ModelProviderPort, lambda: StaticModelProvider())
        provider = container.resolve(ModelProviderPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        The model provider and the storage backend are chosen from
        ``config.llm.provider`` and ``config.storage.backend``.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.rendering import FoliumItineraryRenderer
        from .ports.model_provider import ModelProviderPort
        from .ports.rendering import MapRendererPort
        from .ports.repository import ItineraryRepositoryPort
        from .prompts import build_system_instruction
        from .services import TripPlannerService

        config = config or get_config()
        container = cls(config=config)

        # Model provider based on config
        def create_model_provider() -> ModelProviderPort:
            if config.llm.provider == "static":
                from .adapters.llm.static_provider import StaticModelProvider

                return StaticModelProvider()
            from .adapters.llm.gemini_adapter import GeminiModelProvider

            return GeminiModelProvider(config.llm)

        container.register(ModelProviderPort, create_model_provider)

        # Storage based on config
        def create_repository() -> ItineraryRepositoryPort:
            if config.storage.backend == "mongo":
                from .adapters.storage.mongo_repository import MongoItineraryRepository

                return MongoItineraryRepository(config.storage)
            from .adapters.storage.memory_repository import InMemoryItineraryRepository

            return InMemoryItineraryRepository()

        container.register(ItineraryRepositoryPort, create_repository)

        # Rendering
        container.register(MapRendererPort, lambda: FoliumItineraryRenderer())

        # Main service
        def create_trip_planner() -> TripPlannerService:
            return TripPlannerService(
                model_provider=container.resolve(ModelProviderPort),
                repository=container.resolve(ItineraryRepositoryPort),
                map_renderer=container.resolve(MapRendererPort),
                system_instruction=build_system_instruction(
                    language=config.llm.narrative_language,
                    sentinel=config.stream.sentinel,
                ),
                sentinel=config.stream.sentinel,
            )

        container.register(TripPlannerService, create_trip_planner)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container."""
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
