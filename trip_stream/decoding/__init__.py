"""Decoding of streamed model responses.

- SentinelMatcher: incremental delimiter matching (KMP)
- StreamDecoder: narrative / trailer split over fragments
- text_fragments: incremental UTF-8 decoding of byte streams
- sanitize: code-fence stripping for the trailer
- PayloadValidator: trailer JSON to ItineraryPayload
"""

from .decoder import StreamDecoder, text_fragments
from .sanitizer import sanitize
from .sentinel import SentinelMatcher, failure_function
from .validator import PayloadValidator, validate

__all__ = [
    "SentinelMatcher",
    "StreamDecoder",
    "PayloadValidator",
    "failure_function",
    "sanitize",
    "text_fragments",
    "validate",
]
