# tests/conftest.py
"""
Shared pytest fixtures for dialtone tests.

HTTP is faked with httpx.MockTransport; no test touches the network.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from dialtone import ClientOptions, Dialtone, ProviderConfig, ProviderCredentials


class ChunkedByteStream(httpx.AsyncByteStream):
    """Response body delivered in exactly the given byte chunks; records whether it was closed."""

    def __init__(self, chunks: list[bytes]) -> None:
        self.chunks = chunks
        self.chunks_read = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.chunks_read += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        openai=ProviderCredentials(api_key="sk-test-openai"),
        groq=ProviderCredentials(api_key="gsk-test-groq"),
    )


@pytest.fixture
def client_options(provider_config) -> ClientOptions:
    return ClientOptions(
        api_key="dt-test-key",
        base_url="http://dialtone.test",
        provider_config=provider_config,
    )


@pytest.fixture
def make_client(client_options) -> Callable[..., Dialtone]:
    """Build a Dialtone client whose HTTP calls are answered by *handler*."""

    def _make(handler: Callable[[httpx.Request], Any], **overrides: Any) -> Dialtone:
        options = client_options
        if overrides:
            options = ClientOptions.from_dict(client_options.model_dump(), **overrides)
        transport = httpx.MockTransport(handler)
        return Dialtone(options, http_client=httpx.AsyncClient(transport=transport))

    return _make


@pytest.fixture
def chunked_stream() -> Callable[[list[bytes]], ChunkedByteStream]:
    return ChunkedByteStream
