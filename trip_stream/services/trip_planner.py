"""Trip planner service - Main orchestrator.

Sends a trip request to the model provider, decodes the streamed answer
through a StreamSession, and offers persistence and map rendering of
the resulting itinerary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..domain.errors import ConfigurationError, PayloadError, TransportError
from ..domain.models import (
    SENTINEL,
    ItineraryPayload,
    SavedItinerary,
    SessionResult,
    SessionState,
    TripPlan,
)
from ..ports.model_provider import ModelProviderPort
from ..ports.rendering import MapRendererPort
from ..ports.repository import ItineraryRepositoryPort
from ..prompts import build_system_instruction
from .stream_session import StreamSession

NarrativeCallback = Callable[[str], None]


@dataclass
class TripPlannerService:
    """Main service for planning trips from free text.

    This service orchestrates:
    1. Streaming a response from the model provider
    2. Decoding narrative and itinerary through a StreamSession
    3. Optional persistence of the completed trip
    4. Optional map rendering

    Attributes:
        model_provider: Streams generated text
        repository: Optional storage for completed trips
        map_renderer: Optional map rendering
        system_instruction: Instruction sent with every request
        sentinel: Delimiter between narrative and JSON
    """

    model_provider: ModelProviderPort
    repository: Optional[ItineraryRepositoryPort] = None
    map_renderer: Optional[MapRendererPort] = None
    system_instruction: str = field(default_factory=build_system_instruction)
    sentinel: str = SENTINEL

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def new_session(self) -> StreamSession:
        return StreamSession(sentinel=self.sentinel)

    def _fragments(self, prompt: str) -> Iterator[str]:
        # Defers the provider call so that failures to open the stream
        # reach the session as transport errors.
        yield from self.model_provider.stream(self.system_instruction, prompt)

    def stream(self, prompt: str, session: StreamSession) -> Iterator[str]:
        """Yield narrative segments for a request as they are decoded.

        The terminal result is available on ``session.result`` once the
        iterator is exhausted.

        Raises:
            ValueError: If the prompt is empty.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt is required")

        self._logger.info(
            "Starting trip plan",
            extra={"session": session.session_id, "prompt_chars": len(prompt)},
        )
        return session.consume(self._fragments(prompt))

    def plan(
        self,
        prompt: str,
        on_narrative: Optional[NarrativeCallback] = None,
        session: Optional[StreamSession] = None,
    ) -> SessionResult:
        """Plan a trip and return the terminal session result.

        Args:
            prompt: The user's free-text trip request.
            on_narrative: Called with each narrative segment as it arrives.
            session: Session to drive; pass one to be able to cancel it.

        Returns:
            SessionResult; the narrative is present whatever happened to
            the structured payload.

        Raises:
            ValueError: If the prompt is empty.
        """
        session = session or self.new_session()
        for segment in self.stream(prompt, session):
            if on_narrative is not None:
                on_narrative(segment)

        result = session.result
        assert result is not None
        self._logger.info(
            "Trip plan finished",
            extra={
                "session": session.session_id,
                "state": result.state.name,
                "locations": len(result.payload.locations) if result.payload else 0,
            },
        )
        return result

    def plan_safe(
        self,
        prompt: str,
        on_narrative: Optional[NarrativeCallback] = None,
    ) -> tuple[Optional[SessionResult], Optional[str]]:
        """Plan a trip, returning an error message instead of raising.

        Returns:
            Tuple of (SessionResult or None, error message or None). A
            result is returned alongside the message when the session
            failed, so the narrative can still be shown.
        """
        try:
            result = self.plan(prompt, on_narrative)
        except ValueError as e:
            return None, f"Error: {e}"
        except Exception as e:
            self._logger.exception("Unexpected error while planning trip")
            return None, f"Error: {e}"

        if result.state is SessionState.FAILED:
            return result, self.describe_error(result)
        if result.state is SessionState.CANCELLED:
            return result, "Cancelled"
        return result, None

    @staticmethod
    def describe_error(result: SessionResult) -> Optional[str]:
        error = result.error
        if error is None:
            return None
        if isinstance(error, TransportError):
            return f"Failed to connect to model: {error.message}"
        if isinstance(error, PayloadError):
            return f"Map data unavailable: {error.message}"
        return f"Error: {error}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _require_repository(self) -> ItineraryRepositoryPort:
        if self.repository is None:
            raise ConfigurationError(
                "No itinerary repository configured",
                setting_name="TRIP_STORAGE_BACKEND",
            )
        return self.repository

    def save_trip(self, result: SessionResult) -> str:
        """Persist a completed trip.

        Raises:
            ValueError: If the result carries no itinerary payload.
            ConfigurationError: If no repository is configured.
            PersistenceError: If the repository rejects the write.
        """
        trip = TripPlan.from_result(result)
        if trip is None:
            raise ValueError("Only trips with an itinerary payload can be saved")
        return self._require_repository().save(trip)

    def list_trips(self) -> list[SavedItinerary]:
        return self._require_repository().list()

    def delete_trip(self, identifier: str) -> bool:
        return self._require_repository().delete_by_id(identifier)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_map(self, payload: ItineraryPayload, output_path: Path) -> Path:
        """Render an itinerary map.

        Raises:
            ConfigurationError: If no map renderer is configured.
            RenderingError: If rendering fails.
        """
        if self.map_renderer is None:
            raise ConfigurationError("No map renderer configured")
        return self.map_renderer.render(payload, output_path)

    def format_result(self, result: SessionResult, map_path: Optional[Path] = None) -> str:
        """Summarize a result as human-readable text."""
        if result.payload is None:
            lines = [f"No map data ({result.state.name})"]
            message = self.describe_error(result)
            if message:
                lines.append(message)
            return "\n".join(lines)

        payload = result.payload
        lines = [
            f"{payload.title} - {payload.destination} ({payload.duration})",
            f"Locations: {len(payload.locations)}",
        ]
        for loc in payload.locations:
            day = f"Day {loc.day}: " if loc.day is not None else ""
            lines.append(f"  {day}{loc.name} [{loc.category.value}] ({loc.lat}, {loc.lng})")
        if result.warning is not None:
            lines.append(f"Warning: {result.warning}")
        if map_path:
            lines.append(f"Map saved to: {map_path}")
        return "\n".join(lines)
