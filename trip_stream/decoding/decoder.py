"""Dual-channel stream decoder.

Splits a streamed model response into the narrative that precedes the
sentinel and the raw trailer that follows it. Narrative is released as
soon as it provably cannot be part of the sentinel, so a caller can
display it while the stream is still arriving.
"""

from __future__ import annotations

import codecs
import logging
from typing import Iterable, Iterator, Optional, Union

from ..domain.errors import DecoderStateError
from ..domain.models import SENTINEL, DecodedStream
from .sentinel import SentinelMatcher

logger = logging.getLogger(__name__)


def text_fragments(
    chunks: Iterable[Union[bytes, str]], encoding: str = "utf-8"
) -> Iterator[str]:
    """Decode a byte stream into text fragments.

    Multi-byte characters split across chunks are held back until they
    are complete; str chunks pass through unchanged. Invalid bytes are
    replaced rather than raised.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    for chunk in chunks:
        text = chunk if isinstance(chunk, str) else decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


class StreamDecoder:
    """Feeds fragments through a SentinelMatcher and routes text.

    Feeding any partition of the same response yields the same narrative
    and trailer as feeding it whole.

    Example:
        decoder = StreamDecoder()
        for fragment in fragments:
            for segment in decoder.feed(fragment):
                display(segment)
        decoded = decoder.finish()
    """

    def __init__(self, sentinel: str = SENTINEL) -> None:
        self._matcher = SentinelMatcher(sentinel)
        self._segments: list[str] = []
        self._held = ""
        self._trailer: list[str] = []
        self._finished = False

    @property
    def sentinel_found(self) -> bool:
        return self._matcher.matched

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def narrative(self) -> str:
        """Narrative released so far."""
        return "".join(self._segments)

    def feed(self, fragment: str) -> list[str]:
        """Consume one fragment.

        Args:
            fragment: The next piece of the response, of any length.

        Returns:
            Narrative segments confirmed by this fragment (possibly none).

        Raises:
            DecoderStateError: If the decoder was already finished.
        """
        if self._finished:
            raise DecoderStateError("Cannot feed a finished decoder")
        if not fragment:
            return []

        if self._matcher.matched:
            self._trailer.append(fragment)
            return []

        end = self._matcher.scan(fragment)
        text = self._held + fragment

        if end is not None:
            # The sentinel occupies the last len(sentinel) chars of this cut.
            cut = len(self._held) + end
            released = text[: cut - len(self._matcher.sentinel)]
            self._held = ""
            self._trailer.append(text[cut:])
            logger.debug(
                "Sentinel confirmed",
                extra={"narrative_chars": len(self.narrative) + len(released)},
            )
        else:
            keep = self._matcher.pending
            split = len(text) - keep
            released = text[:split]
            self._held = text[split:]

        if not released:
            return []
        self._segments.append(released)
        return [released]

    def finish(self) -> DecodedStream:
        """Signal the end of the stream.

        Withheld text is flushed as narrative when the sentinel never
        completed; a response without a sentinel is a valid outcome.

        Raises:
            DecoderStateError: If called more than once.
        """
        if self._finished:
            raise DecoderStateError("Decoder already finished")
        self._finished = True

        trailer: Optional[str] = None
        if self._matcher.matched:
            trailer = "".join(self._trailer)
        elif self._held:
            self._segments.append(self._held)
            self._held = ""

        return DecodedStream(narrative=self.narrative, trailer=trailer)
