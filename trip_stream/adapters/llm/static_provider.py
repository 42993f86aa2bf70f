"""Canned model provider for offline runs and tests.

Replays a fixed response, cut into fragments of a chosen size or given
explicitly, so the decoder can be exercised without network access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from ...domain.errors import TransportError

DEMO_RESPONSE = (
    "# 2 days in Chiang Mai\n\n"
    "## Day 1\n- Morning at Wat Phra That Doi Suthep\n- Khao soi for lunch\n\n"
    "## Day 2\n- Stroll the Sunday Walking Street market\n"
    "---JSON_DATA---\n"
    "```json\n"
    '{"title": "Old City and Mountain Temples", "destination": "Chiang Mai", '
    '"duration": "2 days", "locations": ['
    '{"name": "Wat Phra That Doi Suthep", "lat": 18.8048, "lng": 98.9217, '
    '"day": 1, "description": "Golden chedi above the city", "type": "temple"}, '
    '{"name": "Khao Soi Khun Yai", "lat": 18.7966, "lng": 98.9854, '
    '"day": 1, "description": "Curry noodles", "type": "restaurant"}, '
    '{"name": "Sunday Walking Street", "lat": 18.7877, "lng": 98.9931, '
    '"day": 2, "description": "Night market on Ratchadamnoen Road", "type": "market"}'
    "]}\n"
    "```"
)


@dataclass
class StaticModelProvider:
    """Replays a fixed response as a fragment stream.

    Attributes:
        response: Full response text to replay
        chunk_size: Fragment length used when ``fragments`` is not given
        fragments: Explicit fragment sequence, overrides ``response``
        fail_after: Raise TransportError after this many fragments
    """

    response: str = DEMO_RESPONSE
    chunk_size: int = 24
    fragments: Optional[Sequence[str]] = None
    fail_after: Optional[int] = None

    calls: list[tuple[str, str]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")

    def _pieces(self) -> Sequence[str]:
        if self.fragments is not None:
            return self.fragments
        return [
            self.response[i : i + self.chunk_size]
            for i in range(0, len(self.response), self.chunk_size)
        ]

    def stream(self, system_instruction: str, prompt: str) -> Iterator[str]:
        self.calls.append((system_instruction, prompt))
        for index, piece in enumerate(self._pieces()):
            if self.fail_after is not None and index >= self.fail_after:
                raise TransportError(
                    "Simulated transport failure",
                    provider="static",
                    fragments_received=index,
                )
            yield piece
