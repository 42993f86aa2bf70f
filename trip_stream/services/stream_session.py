"""Per-request state machine around the stream decoder.

A StreamSession is driven by exactly three external events:
fragment_arrived, stream_ended (optionally carrying a transport failure)
and cancel. It owns one StreamDecoder, runs the trailer through the
sanitizer and validator at the end of the stream, and produces a single
terminal SessionResult.

State graph:

    INIT -> STREAMING -> SENTINEL_FOUND -> COMPLETE | FAILED
                      -> COMPLETE_NO_PAYLOAD
    any non-terminal  -> FAILED (transport) | CANCELLED
"""

from __future__ import annotations

import logging
import uuid
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, Optional

from ..decoding.decoder import StreamDecoder
from ..decoding.sanitizer import sanitize
from ..decoding.validator import PayloadValidator
from ..domain.errors import MalformedPayloadError, PayloadError, TransportError
from ..domain.models import SENTINEL, SessionResult, SessionState


class StreamSession:
    """Decodes one streamed model response.

    Cancelling a session discards the narrative produced so far; the
    cancelled result carries an empty narrative.

    Usage:
        session = StreamSession()
        for segment in session.consume(provider.stream(system, prompt)):
            print(segment, end="")
        result = session.result
    """

    def __init__(
        self,
        sentinel: str = SENTINEL,
        validator: Optional[PayloadValidator] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._decoder = StreamDecoder(sentinel)
        self._validator = validator or PayloadValidator()
        self._state = SessionState.INIT
        self._result: Optional[SessionResult] = None
        self._fragments = 0
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def result(self) -> Optional[SessionResult]:
        """Terminal result, or None while the session is still running."""
        return self._result

    @property
    def narrative(self) -> str:
        """Narrative released so far."""
        return self._decoder.narrative

    @property
    def fragments_received(self) -> int:
        return self._fragments

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def fragment_arrived(self, fragment: str) -> list[str]:
        """Feed one fragment; returns newly confirmed narrative segments.

        Fragments arriving after a terminal state are ignored.
        """
        if self._state.is_terminal:
            self._logger.debug(
                "Ignoring fragment after terminal state",
                extra={"session": self.session_id, "state": self._state.name},
            )
            return []

        self._fragments += 1
        if self._state is SessionState.INIT:
            self._transition(SessionState.STREAMING)

        segments = self._decoder.feed(fragment)
        if self._state is SessionState.STREAMING and self._decoder.sentinel_found:
            self._transition(SessionState.SENTINEL_FOUND)
        return segments

    def stream_ended(self, error: Optional[Exception] = None) -> SessionResult:
        """Signal the end of the upstream stream.

        Args:
            error: The upstream failure, if the stream did not end cleanly.

        Returns:
            The terminal result. Calling again returns the same result.
        """
        if self._result is not None:
            return self._result
        if error is not None:
            return self._fail_transport(error)

        decoded = self._decoder.finish()
        if decoded.trailer is None:
            self._logger.info(
                "Stream ended without structured payload",
                extra={
                    "session": self.session_id,
                    "narrative_chars": len(decoded.narrative),
                },
            )
            return self._terminate(
                SessionResult(
                    state=SessionState.COMPLETE_NO_PAYLOAD,
                    narrative=decoded.narrative,
                )
            )

        candidate = sanitize(decoded.trailer)
        try:
            outcome = self._validator.validate(candidate)
        except PayloadError as e:
            self._logger.warning(
                "Structured payload rejected",
                extra={"session": self.session_id, "error": str(e)},
            )
            return self._payload_failed(decoded.narrative, e)
        except Exception as e:
            self._logger.exception(
                "Unexpected error while validating payload",
                extra={"session": self.session_id},
            )
            return self._payload_failed(
                decoded.narrative,
                MalformedPayloadError(
                    "Trailer could not be validated", raw=candidate, cause=e
                ),
            )

        return self._terminate(
            SessionResult(
                state=SessionState.COMPLETE,
                narrative=decoded.narrative,
                payload=outcome.payload,
                warning=outcome.warning,
            )
        )

    def transport_failed(self, error: Exception) -> SessionResult:
        """Shorthand for ``stream_ended(error)``."""
        return self.stream_ended(error)

    def cancel(self) -> SessionResult:
        """Abort the session; later fragments are ignored."""
        if self._result is not None:
            return self._result
        self._logger.info(
            "Session cancelled",
            extra={"session": self.session_id, "fragments": self._fragments},
        )
        return self._terminate(SessionResult(state=SessionState.CANCELLED))

    # ------------------------------------------------------------------
    # Driving helpers
    # ------------------------------------------------------------------

    def consume(self, fragments: Iterable[str]) -> Iterator[str]:
        """Drive the session from a synchronous fragment source.

        Yields narrative segments as they are confirmed, including the
        flushed tail at the end of the stream. Exceptions raised by the
        source end the session as FAILED. Cancellation is checked before
        each fragment is requested; closing this generator early cancels
        the session. The source is closed when consumption stops.
        """
        iterator = iter(fragments)
        try:
            while not self._state.is_terminal:
                try:
                    fragment = next(iterator)
                except StopIteration:
                    break
                except Exception as e:
                    self.stream_ended(e)
                    return
                for segment in self.fragment_arrived(fragment):
                    if self._state is SessionState.CANCELLED:
                        break
                    yield segment

            if not self._state.is_terminal:
                released = len(self.narrative)
                result = self.stream_ended()
                tail = result.narrative[released:]
                if tail:
                    yield tail
        except GeneratorExit:
            self.cancel()
            raise
        finally:
            close = getattr(iterator, "close", None)
            if close is not None:
                close()

    async def aconsume(self, fragments: AsyncIterable[str]) -> AsyncIterator[str]:
        """Asynchronous counterpart of consume()."""
        iterator = fragments.__aiter__()
        try:
            while not self._state.is_terminal:
                try:
                    fragment = await iterator.__anext__()
                except StopAsyncIteration:
                    break
                except Exception as e:
                    self.stream_ended(e)
                    return
                for segment in self.fragment_arrived(fragment):
                    if self._state is SessionState.CANCELLED:
                        break
                    yield segment

            if not self._state.is_terminal:
                released = len(self.narrative)
                result = self.stream_ended()
                tail = result.narrative[released:]
                if tail:
                    yield tail
        except GeneratorExit:
            self.cancel()
            raise
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fail_transport(self, error: Exception) -> SessionResult:
        if not isinstance(error, TransportError):
            error = TransportError(
                "Upstream stream failed",
                fragments_received=self._fragments,
                cause=error,
            )
        self._logger.error(
            "Transport failure",
            extra={"session": self.session_id, "error": str(error)},
        )
        return self._terminate(
            SessionResult(
                state=SessionState.FAILED,
                narrative=self._decoder.narrative,
                error=error,
            )
        )

    def _payload_failed(self, narrative: str, error: PayloadError) -> SessionResult:
        return self._terminate(
            SessionResult(state=SessionState.FAILED, narrative=narrative, error=error)
        )

    def _terminate(self, result: SessionResult) -> SessionResult:
        self._transition(result.state)
        self._result = result
        return result

    def _transition(self, new_state: SessionState) -> None:
        self._logger.debug(
            "Session state change",
            extra={
                "session": self.session_id,
                "from_state": self._state.name,
                "to_state": new_state.name,
            },
        )
        self._state = new_state
