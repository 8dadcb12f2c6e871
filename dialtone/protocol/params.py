# dialtone/protocol/params.py
"""
Request body assembly for POST /v0/chat/completions.

The server treats an omitted field as "use the server default" and an
explicit null or empty value as an override, so a field the caller did not
set must not appear in the body at all. ChatCompletionParams keeps every
optional field at None until it is supplied, and to_body() drops every None
value recursively (nested unset fields such as Dials.speed included).
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, Field

from ..config import Dials, FallbackConfig, ProviderConfig, RouterModelConfig, ToolsConfig
from ..models import ChatMessage, Tool


class ChatCompletionParams(BaseModel):
    """The request body of a chat completion call."""

    model_config = {"frozen": True}

    messages: list[ChatMessage] = Field(..., description="Conversation so far, oldest first.")
    dials: Dials
    provider_config: ProviderConfig
    router_model_config: RouterModelConfig | None = None
    fallback_config: FallbackConfig | None = None
    tools_config: ToolsConfig | None = None
    stream: bool | None = None
    tools: list[Tool] | None = None

    def to_body(self) -> dict[str, Any]:
        """JSON-ready dict with every unset field removed."""
        return _strip_nulls(self.model_dump(mode="json", exclude_none=True))


def _strip_nulls(value: Any) -> Any:
    # exclude_none stops at model fields; free-form dicts (tool schemas) need this.
    if isinstance(value, dict):
        return {k: _strip_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_strip_nulls(v) for v in value]
    return value


def build_request_body(
    messages: Sequence[ChatMessage | dict[str, Any]],
    dials: Dials,
    provider_config: ProviderConfig,
    *,
    router_model_config: RouterModelConfig | None = None,
    fallback_config: FallbackConfig | None = None,
    tools_config: ToolsConfig | None = None,
    stream: bool | None = None,
    tools: Sequence[Tool | dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Assemble the JSON request body.

    Messages and tools may be given as models or as plain dicts in the
    OpenAI chat format; dicts are validated into models first. Optional
    arguments left as None are omitted from the result. Explicit values,
    including False and empty lists, are kept verbatim.
    """
    params = ChatCompletionParams(
        messages=list(messages),
        dials=dials,
        provider_config=provider_config,
        router_model_config=router_model_config,
        fallback_config=fallback_config,
        tools_config=tools_config,
        stream=stream,
        tools=list(tools) if tools is not None else None,
    )
    return params.to_body()
