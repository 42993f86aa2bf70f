"""Model provider port - Abstraction over streaming text generation.

This protocol defines the contract for generative-language backends,
allowing different implementations (Gemini, a canned replay, ...) to feed
a StreamSession.
"""

from __future__ import annotations

from typing import Iterator, Protocol


class ModelProviderPort(Protocol):
    """Port for streaming model providers.

    Implementations:
    - adapters/llm/gemini_adapter.py (GeminiModelProvider) - Production
    - adapters/llm/static_provider.py (StaticModelProvider) - Offline/testing

    The decoder only relies on fragment order and on the end of the
    iterator; transport details stay inside the adapter.
    """

    def stream(self, system_instruction: str, prompt: str) -> Iterator[str]:
        """Generate a response as a lazy sequence of text fragments.

        Args:
            system_instruction: Fixed instruction describing the output format.
            prompt: The user's free-text trip request.

        Returns:
            Iterator over text fragments; exhaustion marks the end of stream.

        Raises:
            TransportError: If the provider fails mid-stream.
        """
        ...
