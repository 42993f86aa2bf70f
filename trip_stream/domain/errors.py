"""Typed domain errors for Trip Stream.

All errors inherit from TripStreamError and can optionally wrap a root
cause exception for debugging.

Payload errors (MalformedPayloadError, SchemaViolationError) are fatal to
the structured payload only; the narrative decoded from the same stream
is always handed back to the caller. TransportError is fatal to the
whole session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TripStreamError(Exception):
    """Base error for the trip stream domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class TransportError(TripStreamError):
    """The upstream fragment source failed before the end of the stream.

    Attributes:
        provider: Name of the model provider that failed
        fragments_received: Fragments consumed before the failure
    """

    provider: str = ""
    fragments_received: int = 0


@dataclass
class PayloadError(TripStreamError):
    """The structured trailer could not be turned into an itinerary."""


@dataclass
class MalformedPayloadError(PayloadError):
    """The trailer is not parseable as JSON.

    Attributes:
        raw: The sanitized trailer text, kept for diagnostics
    """

    raw: str = ""


@dataclass
class SchemaViolationError(PayloadError):
    """The trailer parsed but misses a required field or has a wrong type.

    Attributes:
        field_name: The offending top-level field ("" for the root object)
    """

    field_name: str = ""


@dataclass
class DecoderStateError(TripStreamError):
    """The decoder was used after it had already been finished."""


@dataclass
class PersistenceError(TripStreamError):
    """An itinerary repository operation failed.

    Attributes:
        operation: Repository operation name ("save", "list", ...)
        backend: Repository backend name
    """

    operation: str = ""
    backend: str = ""


@dataclass
class ConfigurationError(TripStreamError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None


@dataclass
class RenderingError(TripStreamError):
    """Map rendering failed.

    Attributes:
        output_path: Path where rendering was attempted
        renderer_type: Type of renderer that failed
    """

    output_path: Optional[str] = None
    renderer_type: str = ""
