# dialtone/__init__.py
"""
dialtone — async Python client for the Dialtone LLM routing API.

Public API surface:
  Dialtone             — the client; call chat.completions.create()
  ClientOptions        — everything the client captures at construction
  Dials                — quality / cost / speed routing preferences
  ProviderConfig       — upstream provider credentials
  RouterModelConfig    — per-model provider preferences
  FallbackConfig       — server-side fallback policy
  ToolsConfig          — tool-use policy
  ChatMessage, Tool    — request-side models
  ChatCompletion       — non-streaming result
  ChatCompletionChunk  — one unit of a streamed result
  ChatCompletionStream — async iterator of chunks returned when stream=True
  APIError             — base of the HTTP error hierarchy (see exceptions)
"""

from .client import Dialtone
from .config import (
    DEFAULT_ROUTER_MODEL_CONFIG,
    ClientOptions,
    Dials,
    FallbackConfig,
    ProviderConfig,
    ProviderCredentials,
    RouterModelConfig,
    ToolsConfig,
)
from .exceptions import (
    APIError,
    AuthenticationError,
    BadGatewayError,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    DialtoneError,
    ErrorKind,
    InternalServerError,
    MethodNotAllowedError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionFailedError,
    ProviderModerationError,
    RateLimitError,
    RouterDetails,
    StreamDecodeError,
    UnprocessableEntityError,
)
from .models import (
    LLM,
    ChatCompletion,
    ChatCompletionChunk,
    ChatMessage,
    Provider,
    Role,
    TokenUsage,
    Tool,
    ToolCall,
)
from .streaming import ChatCompletionStream

__all__ = [
    "Dialtone",
    "ClientOptions",
    "Dials",
    "ProviderConfig",
    "ProviderCredentials",
    "RouterModelConfig",
    "DEFAULT_ROUTER_MODEL_CONFIG",
    "FallbackConfig",
    "ToolsConfig",
    "LLM",
    "Provider",
    "Role",
    "ChatMessage",
    "Tool",
    "ToolCall",
    "TokenUsage",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionStream",
    "DialtoneError",
    "StreamDecodeError",
    "APIError",
    "ErrorKind",
    "RouterDetails",
    "BadRequestError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "MethodNotAllowedError",
    "ConflictError",
    "PreconditionFailedError",
    "UnprocessableEntityError",
    "RateLimitError",
    "InternalServerError",
    "BadGatewayError",
    "ProviderModerationError",
    "ConfigurationError",
]

__version__ = "0.1.0"
