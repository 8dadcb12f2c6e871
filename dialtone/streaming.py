# dialtone/streaming.py
"""
ChatCompletionStream — the lazy result of a streaming chat completion.

Wraps the open httpx.Response and decodes its JSON Lines body one chunk at a
time as the caller iterates. The response is released on every exit path:
normal exhaustion, an error while decoding, and early abandonment via
aclose() or leaving an ``async with`` block.

    async with await client.chat.completions.create(messages, stream=True) as stream:
        async for chunk in stream:
            ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from .exceptions import APIError, StreamDecodeError
from .models import ChatCompletionChunk
from .protocol.jsonl import aiter_jsonl

logger = logging.getLogger(__name__)


class ChatCompletionStream:
    """Async iterator of ChatCompletionChunk. Forward-only and not restartable."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._iterator = self._iter_chunks()

    @property
    def response(self) -> httpx.Response:
        """The underlying HTTP response (headers, status)."""
        return self._response

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    async def _iter_chunks(self) -> AsyncIterator[ChatCompletionChunk]:
        try:
            async for record in aiter_jsonl(self._response.aiter_bytes()):
                try:
                    chunk = ChatCompletionChunk.model_validate(record)
                except ValidationError as exc:
                    logger.error("Chunk does not match the expected schema: %s", exc)
                    raise StreamDecodeError("Failed to parse chunk", _short(record)) from exc
                yield chunk
        except httpx.HTTPError as exc:
            logger.error("Transport failure while reading stream", exc_info=True)
            raise APIError.unexpected() from exc
        finally:
            await self._response.aclose()

    def __aiter__(self) -> "ChatCompletionStream":
        return self

    async def __anext__(self) -> ChatCompletionChunk:
        return await self._iterator.__anext__()

    async def aclose(self) -> None:
        """Stop iterating and release the connection. Safe to call more than once."""
        await self._iterator.aclose()
        await self._response.aclose()

    async def __aenter__(self) -> "ChatCompletionStream":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()


def _short(record: Any) -> str:
    text = repr(record)
    return text if len(text) <= 200 else text[:200] + "..."
