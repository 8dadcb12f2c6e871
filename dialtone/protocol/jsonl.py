# dialtone/protocol/jsonl.py
"""
Incremental JSON Lines (https://jsonlines.org/) decoder.

Streamed completions arrive as one JSON object per line, but the transport
hands us byte chunks of arbitrary size that are not aligned to record
boundaries. JSONLinesDecoder buffers the tail of each chunk until the next
newline arrives.

Newlines inside JSON string values are escaped as ``\\n`` by the encoder,
so a raw newline byte only ever appears between records and splitting on
it is safe.

Architecture note
-----------------
  feed(chunk)  → decode UTF-8 incrementally, append to buffer, split on
                 "\\n", parse every complete segment, keep the last one.
  flush()      → at end of stream, parse whatever is left unless it is blank.

Blank lines are skipped. A segment that is not valid JSON raises
StreamDecodeError; the stream is never resumed past a bad record.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from typing import Any

from ..exceptions import StreamDecodeError

logger = logging.getLogger(__name__)


class JSONLinesDecoder:
    """Stateful decoder for one JSON Lines byte stream. Not reusable across streams."""

    def __init__(self) -> None:
        # Holds back a multibyte UTF-8 sequence split across two chunks.
        self._utf8 = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    @property
    def buffer(self) -> str:
        """Text received after the last newline, not yet parsed."""
        return self._buffer

    def feed(self, chunk: bytes) -> Iterator[Any]:
        """
        Consume one chunk and return an iterator over the records it
        completed, in arrival order. The buffer is updated before this
        returns; records are parsed as the iterator is advanced.
        """
        self._buffer += self._decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return (_parse(line, "Failed to parse chunk") for line in lines if line.strip())

    def flush(self) -> Iterator[Any]:
        """
        Signal end of stream. Yields the final record if the retained buffer
        holds one; raises StreamDecodeError if it holds anything else.
        """
        remaining = self._buffer + self._decode(b"", final=True)
        self._buffer = ""
        if remaining.strip():
            yield _parse(remaining, "Failed to parse remaining buffer data")

    def _decode(self, chunk: bytes, final: bool = False) -> str:
        try:
            return self._utf8.decode(chunk, final=final)
        except UnicodeDecodeError as exc:
            logger.error("Stream is not valid UTF-8: %s", exc)
            raise StreamDecodeError("Failed to decode chunk as UTF-8", repr(chunk)) from exc


def _parse(text: str, error_message: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("%s: %r", error_message, text)
        raise StreamDecodeError(error_message, text) from exc


async def aiter_jsonl(byte_stream: AsyncIterable[bytes]) -> AsyncIterator[Any]:
    """
    Yield decoded records from an async byte stream.

    Pull-driven: the next chunk is only read once every record from the
    previous one has been consumed.
    """
    decoder = JSONLinesDecoder()
    async for chunk in byte_stream:
        for record in decoder.feed(chunk):
            yield record
    for record in decoder.flush():
        yield record
