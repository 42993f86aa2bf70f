"""Gemini model provider adapter.

Streams a trip plan from Google's Gemini API through the ``google-genai``
SDK. Each non-empty chunk of generated text becomes one fragment; SDK and
network failures surface as TransportError.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from google import genai
from google.genai import types

from ...config import LLMConfig, get_config
from ...domain.errors import ConfigurationError, TransportError


@dataclass
class GeminiModelProvider:
    """Gemini streaming adapter.

    This adapter implements ModelProviderPort. The SDK client is created
    lazily on the first request.

    Attributes:
        config: Model configuration (model name, API key, timeout)
    """

    config: LLMConfig = field(default_factory=lambda: get_config().llm)

    _client: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _api_key(self) -> str:
        if self.config.api_key is not None:
            return self.config.api_key.get_secret_value()
        key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not key:
            raise ConfigurationError(
                "No Gemini API key configured",
                setting_name="TRIP_LLM_API_KEY",
                expected_type="str",
            )
        return key

    def _get_client(self) -> Any:
        """Get or initialize the SDK client."""
        if self._client is not None:
            return self._client

        self._logger.debug(
            "Initializing Gemini client",
            extra={
                "model": self.config.model_name,
                "timeout": self.config.timeout_seconds,
            },
        )
        self._client = genai.Client(
            api_key=self._api_key(),
            http_options=types.HttpOptions(timeout=self.config.timeout_seconds * 1000),
        )
        return self._client

    def _generation_config(self, system_instruction: str) -> types.GenerateContentConfig:
        kwargs: dict[str, Any] = {"system_instruction": system_instruction}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature
        return types.GenerateContentConfig(**kwargs)

    def stream(self, system_instruction: str, prompt: str) -> Iterator[str]:
        """Stream generated text fragments.

        Args:
            system_instruction: Fixed instruction describing the output format.
            prompt: The user's trip request.

        Yields:
            Non-empty text fragments in generation order.

        Raises:
            ConfigurationError: If no API key is available.
            TransportError: If the request or the stream fails.
        """
        client = self._get_client()
        received = 0

        self._logger.info(
            "Requesting streamed plan",
            extra={"model": self.config.model_name, "prompt_chars": len(prompt)},
        )

        try:
            response = client.models.generate_content_stream(
                model=self.config.model_name,
                contents=prompt,
                config=self._generation_config(system_instruction),
            )
            for chunk in response:
                text = chunk.text
                if not text:
                    continue
                received += 1
                yield text
        except TransportError:
            raise
        except Exception as e:
            self._logger.error(
                "Gemini stream failed",
                extra={"error": str(e), "fragments": received},
            )
            raise TransportError(
                f"Gemini stream failed: {e}",
                provider="gemini",
                fragments_received=received,
                cause=e,
            ) from e

        self._logger.info("Gemini stream finished", extra={"fragments": received})
