# dialtone/client.py
"""
Dialtone — the client class the developer interacts with.

One chat completion call:
  1. Assemble the request body from the held options and per-call arguments.
  2. POST it to {base_url}/v0/chat/completions with bearer auth.
  3. On an error status, classify the JSON error body and raise. A body that
     is not JSON counts as an unexpected failure.
  4. On success, return a ChatCompletion, or a ChatCompletionStream that
     decodes the JSON Lines body lazily when stream=True.

Anything that goes wrong outside those paths (transport faults, a success
body that is not a completion) is raised as APIError.unexpected(). Nothing
is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from .config import ClientOptions
from .constants import CHAT_COMPLETIONS_PATH
from .exceptions import APIError, generate_error
from .models import ChatCompletion, ChatMessage, Tool
from .protocol.params import build_request_body
from .streaming import ChatCompletionStream

logger = logging.getLogger(__name__)


class Dialtone:
    """
    Async client for the Dialtone routing API.

    Parameters
    ----------
    options:
        Full client configuration. Alternatively pass the ClientOptions
        fields as keyword arguments, or use one of the factory class
        methods (from_dict, from_yaml, from_env).
    http_client:
        Optional pre-configured httpx.AsyncClient. The caller keeps
        ownership of a client passed in here; close() only closes the
        client Dialtone created itself.

    The options are frozen, so one instance can serve any number of
    concurrent calls.
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        if options is None:
            options = ClientOptions.from_dict(kwargs)
        elif kwargs:
            options = ClientOptions.from_dict(options.model_dump(), **kwargs)
        self._options = options

        self._owns_http_client = http_client is None
        if http_client is None:
            # No client-side timeout: long streams are bounded by the caller.
            http_client = httpx.AsyncClient(
                timeout=None,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        self._http = http_client

        self.chat = Chat(self)

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], *, http_client: httpx.AsyncClient | None = None, **kwargs: Any
    ) -> "Dialtone":
        """Construct from a plain Python dictionary."""
        return cls(ClientOptions.from_dict(data, **kwargs), http_client=http_client)

    @classmethod
    def from_yaml(
        cls, path: str, *, http_client: httpx.AsyncClient | None = None, **kwargs: Any
    ) -> "Dialtone":
        """Construct from a YAML config file."""
        return cls(ClientOptions.from_yaml(path, **kwargs), http_client=http_client)

    @classmethod
    def from_env(
        cls, *, http_client: httpx.AsyncClient | None = None, **kwargs: Any
    ) -> "Dialtone":
        """Construct from environment variables."""
        return cls(ClientOptions.from_env(**kwargs), http_client=http_client)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def completions_url(self) -> str:
        return f"{self._options.base_url}{CHAT_COMPLETIONS_PATH}"

    async def create_chat_completion(
        self,
        messages: Sequence[ChatMessage | dict[str, Any]],
        *,
        tools: Sequence[Tool | dict[str, Any]] | None = None,
        stream: bool | None = None,
    ) -> ChatCompletion | ChatCompletionStream:
        """
        Send one chat completion request.

        Parameters
        ----------
        messages:
            The conversation, as ChatMessage models or OpenAI-format dicts.
        tools:
            Tool declarations the model may call.
        stream:
            When true, return a ChatCompletionStream instead of a
            ChatCompletion. Left unset, the field is not sent.

        Raises
        ------
        APIError
            A status-specific subclass for error responses, or the generic
            APIError with the unexpected-failure status for anything else.
        pydantic.ValidationError
            If *messages* or *tools* are malformed; nothing is sent.
        """
        options = self._options
        body = build_request_body(
            messages,
            options.dials,
            options.provider_config,
            router_model_config=options.router_model_config,
            fallback_config=options.fallback_config,
            tools_config=options.tools_config,
            stream=stream,
            tools=tools,
        )
        headers = {
            "Authorization": f"Bearer {options.api_key}",
            "Content-Type": "application/json",
        }

        logger.debug(
            "POST %s (stream=%s, messages=%d, tools=%d)",
            self.completions_url,
            bool(stream),
            len(body["messages"]),
            len(body.get("tools", ())),
        )

        response: httpx.Response | None = None
        handed_off = False
        try:
            request = self._http.build_request(
                "POST", self.completions_url, json=body, headers=headers
            )
            response = await self._http.send(request, stream=True)

            if not response.is_success:
                await response.aread()
                raise generate_error(
                    response.status_code, response.json(), response.reason_phrase
                )

            if stream:
                handed_off = True
                return ChatCompletionStream(response)

            await response.aread()
            return ChatCompletion.model_validate(response.json())
        except APIError as exc:
            logger.warning("Chat completion failed: %s", exc)
            raise
        except Exception as exc:
            logger.error("Unexpected failure creating chat completion", exc_info=True)
            raise APIError.unexpected() from exc
        finally:
            if response is not None and not handed_off:
                await response.aclose()

    async def close(self) -> None:
        """Release the HTTP client, if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "Dialtone":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(base_url={self._options.base_url!r})"


class Completions:
    """``client.chat.completions``, laid out like the OpenAI SDK."""

    def __init__(self, client: Dialtone) -> None:
        self._client = client

    async def create(
        self,
        messages: Sequence[ChatMessage | dict[str, Any]],
        *,
        tools: Sequence[Tool | dict[str, Any]] | None = None,
        stream: bool | None = None,
    ) -> ChatCompletion | ChatCompletionStream:
        return await self._client.create_chat_completion(messages, tools=tools, stream=stream)


class Chat:
    def __init__(self, client: Dialtone) -> None:
        self.completions = Completions(client)

