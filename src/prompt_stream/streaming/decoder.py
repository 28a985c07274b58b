"""streaming.decoder

Incremental decoder for the ``data: {...}`` event stream returned by a
streaming chat-completions call.

Network segments arrive with arbitrary boundaries: a segment may stop in the
middle of a line, or in the middle of a multi-byte UTF-8 sequence. The decoder
therefore keeps the incomplete tail of the byte stream buffered between calls
to :meth:`StreamDecoder.feed` and only ever decodes complete lines.

Line handling
=============
* lines not starting with ``data: `` (keep-alives, comments, blank
  separators) are ignored;
* ``data:`` payloads that are not a valid `CompletionChunk` (including the
  ``[DONE]`` sentinel some services send) are skipped without error;
* every parsed chunk is retained in arrival order and its delta text is
  handed to the registered `DeltaHandler` synchronously.

End of stream is signalled by the transport only; call :meth:`close` once
the body is exhausted to flush a final unterminated line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import ValidationError

from prompt_stream.core.types import CompletionChunk
from prompt_stream.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = get_logger(__name__)

DATA_PREFIX = 'data: '
_DATA_PREFIX_BYTES = DATA_PREFIX.encode()


@runtime_checkable
class DeltaHandler(Protocol):
    """Receives the text produced by each decoded chunk.

    Called inline with decoding, so implementations must return promptly.
    """

    def on_delta(self, text: str) -> None: ...


class StreamDecoder:
    """Stateful line reassembler + chunk parser for one response."""

    def __init__(self, handler: DeltaHandler | None = None) -> None:
        self._handler = handler
        self._buffer = bytearray()
        self._chunks: list[CompletionChunk] = []
        self._skipped = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def chunks(self) -> list[CompletionChunk]:
        """Chunks decoded so far, in arrival order."""
        return list(self._chunks)

    @property
    def skipped(self) -> int:
        """Number of ``data:`` lines that could not be parsed."""
        return self._skipped

    def feed(self, segment: bytes) -> list[CompletionChunk]:
        """Consume one network *segment*; return the chunks it completed."""
        if self._closed:
            raise RuntimeError('feed() called on a closed StreamDecoder')
        self._buffer.extend(segment)
        *lines, tail = self._buffer.split(b'\n')
        self._buffer = bytearray(tail)
        return self._handle_lines(lines)

    def feed_all(self, segments: Iterable[bytes]) -> list[CompletionChunk]:
        """Feed every segment then close; return all chunks of the stream."""
        for segment in segments:
            self.feed(segment)
        self.close()
        return self.chunks

    def close(self) -> list[CompletionChunk]:
        """Signal end-of-stream, decoding any buffered unterminated line."""
        if self._closed:
            return []
        self._closed = True
        tail, self._buffer = bytes(self._buffer), bytearray()
        return self._handle_lines([tail]) if tail else []

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _handle_lines(self, lines: Iterable[bytes]) -> list[CompletionChunk]:
        completed: list[CompletionChunk] = []
        for raw in lines:
            chunk = self._parse_line(raw)
            if chunk is None:
                continue
            self._chunks.append(chunk)
            completed.append(chunk)
            if self._handler is not None:
                self._handler.on_delta(chunk.delta_text())
        return completed

    def _parse_line(self, raw: bytes) -> CompletionChunk | None:
        if not raw.startswith(_DATA_PREFIX_BYTES):
            return None

        try:
            payload = raw[len(_DATA_PREFIX_BYTES) :].decode('utf-8').removesuffix('\r')
        except UnicodeDecodeError:
            self._skip('invalid_utf8', raw)
            return None

        try:
            return CompletionChunk.model_validate_json(payload)
        except ValidationError:
            self._skip('malformed_frame', raw)
            return None

    def _skip(self, reason: str, raw: bytes) -> None:
        self._skipped += 1
        logger.debug('stream_line_skipped', reason=reason, line=raw[:200])
