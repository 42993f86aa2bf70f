"""Model provider adapters - Implementations of ModelProviderPort.

Available implementations:
- GeminiModelProvider: Google Gemini streaming via google-genai
- StaticModelProvider: Replays a canned response (offline, tests)
"""

from .gemini_adapter import GeminiModelProvider
from .static_provider import DEMO_RESPONSE, StaticModelProvider

__all__ = ["GeminiModelProvider", "StaticModelProvider", "DEMO_RESPONSE"]
