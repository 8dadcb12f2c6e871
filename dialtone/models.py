# dialtone/models.py
"""
Pydantic v2 data models for the Dialtone wire format.

Request-side models (ChatMessage, Tool) are built by the caller; response-side
models (ChatCompletion, ChatCompletionChunk) are parsed from the server. All of
them are frozen: a message or completion never changes after construction.

Response models ignore unknown fields and keep unknown model / provider ids as
plain strings, so a catalogue change on the server never breaks parsing.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class LLM(str, Enum):
    """Models the router can select. Values are the wire identifiers."""

    claude_3_5_sonnet = "claude-3-5-sonnet-20240620"
    claude_3_haiku = "claude-3-haiku-20240307"
    gpt_4o = "gpt-4o-2024-05-13"
    gpt_4o_mini = "gpt-4o-mini-2024-07-18"
    gemini_1_5_pro = "gemini-1.5-pro"
    gemini_1_5_flash = "gemini-1.5-flash"
    command_r_plus = "command-r-plus"
    command_r = "command-r"
    llama_3_70b = "llama3-70b-8192"
    llama_3_1_8b = "llama3.1-8b"
    llama_3_1_70b = "llama3.1-70b"
    llama_3_1_405b = "llama3.1-405b"


class Provider(str, Enum):
    """Upstream inference providers."""

    OpenAI = "openai"
    Groq = "groq"
    DeepInfra = "deepinfra"
    Fireworks = "fireworks"
    Together = "together"
    Replicate = "replicate"
    Anthropic = "anthropic"
    Google = "google"
    Cohere = "cohere"


class Role(str, Enum):
    assistant = "assistant"
    user = "user"
    system = "system"
    tool = "tool"


FinishReason = Literal["stop", "length", "tool_calls", "content_filter", "function_call"]

# Known enum value first, raw string as a fallback for ids this client predates.
ModelId = Union[LLM, str]
ProviderId = Union[Provider, str]


class _Frozen(BaseModel):
    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Tool calling
# ---------------------------------------------------------------------------


class Tool(_Frozen):
    """A tool declaration sent with the request (OpenAI function format)."""

    type: Literal["function"] = "function"
    function: dict[str, Any] = Field(
        ..., description="Function schema: name, description, JSON-schema parameters."
    )


class ToolCallFunction(_Frozen):
    name: str
    arguments: str = Field(..., description="JSON-encoded argument object.")

    def parsed_arguments(self) -> Any:
        """Decode the JSON argument string. Raises json.JSONDecodeError if malformed."""
        return json.loads(self.arguments)


class ToolCall(_Frozen):
    id: str
    type: Literal["function"] = "function"
    function: ToolCallFunction


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class ChatMessage(_Frozen):
    """
    One message in a conversation.

    Tool results are echoed back as a ChatMessage with role "tool", the
    originating tool_call_id and the function name.
    """

    role: Role
    content: str | None = Field(
        default=None,
        description="Message text. May be None on assistant messages that only carry tool calls.",
    )
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None
    name: str | None = None


class TokenUsage(_Frozen):
    prompt_tokens: int = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)


# ---------------------------------------------------------------------------
# Non-streaming result
# ---------------------------------------------------------------------------


class Choice(_Frozen):
    message: ChatMessage


class ChatCompletion(_Frozen):
    """The result of a non-streaming chat completion."""

    choices: list[Choice]
    model: ModelId = Field(..., union_mode="left_to_right")
    provider: ProviderId = Field(..., union_mode="left_to_right")
    usage: TokenUsage | None = None


# ---------------------------------------------------------------------------
# Streaming result
# ---------------------------------------------------------------------------


class ChoiceDeltaToolCallFunction(_Frozen):
    name: str | None = None
    arguments: str | None = None


class ChoiceDeltaToolCall(_Frozen):
    """A fragment of a tool call; fragments sharing an index belong together."""

    index: int
    id: str | None = None
    type: Literal["function"] | None = None
    function: ChoiceDeltaToolCallFunction | None = None


class ChoiceDelta(_Frozen):
    role: Role | None = None
    content: str | None = None
    tool_calls: list[ChoiceDeltaToolCall] | None = None


class ChunkChoice(_Frozen):
    delta: ChoiceDelta
    finish_reason: Union[FinishReason, str, None] = Field(None, union_mode="left_to_right")


class ChatCompletionChunk(_Frozen):
    """
    One unit of a streamed completion.

    usage is only populated on the terminal chunk(s) of the stream.
    """

    choices: list[ChunkChoice]
    model: ModelId = Field(..., union_mode="left_to_right")
    provider: ProviderId = Field(..., union_mode="left_to_right")
    usage: TokenUsage | None = None
