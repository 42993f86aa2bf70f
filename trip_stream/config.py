"""Centralized configuration using Pydantic Settings.

Configuration can be overridden via environment variables:
- TRIP_STREAM_SENTINEL=---JSON_DATA---
- TRIP_LLM_PROVIDER=static
- TRIP_LLM_API_KEY=...
- TRIP_STORAGE_BACKEND=mongo
- TRIP_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import SENTINEL


class StreamConfig(BaseSettings):
    """Stream decoding configuration.

    Environment variables prefixed with TRIP_STREAM_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_STREAM_")

    sentinel: str = SENTINEL

    @field_validator("sentinel")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("sentinel must not be empty")
        return value


class LLMConfig(BaseSettings):
    """Generative model configuration.

    Environment variables prefixed with TRIP_LLM_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_LLM_", protected_namespaces=())

    provider: Literal["gemini", "static"] = "gemini"
    model_name: str = "gemini-1.5-flash"
    api_key: Optional[SecretStr] = None
    timeout_seconds: int = 60
    temperature: Optional[float] = None
    narrative_language: str = "Thai"


class StorageConfig(BaseSettings):
    """Itinerary storage configuration.

    Environment variables prefixed with TRIP_STORAGE_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_STORAGE_")

    backend: Literal["memory", "mongo"] = "memory"
    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "trip_stream"
    collection: str = "trips"
    server_selection_timeout_ms: int = 5000


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with TRIP_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.llm.model_name)
        print(config.storage.backend)

    Environment variables prefixed with TRIP_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_")

    stream: StreamConfig = Field(default_factory=StreamConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    output_dir: Path = Field(default_factory=Path.cwd)

    @property
    def project_root(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
