# dialtone/config.py
"""
ClientOptions and the routing preference records it carries.

Supports construction from:
  - Python dict   → ClientOptions.from_dict(data)
  - YAML file     → ClientOptions.from_yaml("dialtone.yaml")
  - Environment   → ClientOptions.from_env()

Every model here is frozen. The built-in defaults (DEFAULT_DIALS,
DEFAULT_ROUTER_MODEL_CONFIG) are module-level constants that are injected
into each ClientOptions and never mutated, so concurrent clients cannot
interfere with each other.
"""

from __future__ import annotations

import os
import re
from typing import Any, ClassVar, Iterable

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_COST,
    DEFAULT_QUALITY,
    DIALTONE_BASE_URL,
    ENV_API_KEY,
    ENV_BASE_URL,
    ENV_PROVIDER_KEY_TMPL,
)
from .env import read_env
from .models import LLM, Provider


class _Frozen(BaseModel):
    model_config = {"frozen": True}


class Dials(_Frozen):
    """
    Routing preference weights. Values live in an implicit [0, 1] range;
    they are not validated here, the server decides what to accept.
    """

    quality: float = DEFAULT_QUALITY
    cost: float = DEFAULT_COST
    speed: float | None = None


DEFAULT_DIALS = Dials()


# ---------------------------------------------------------------------------
# Provider credentials
# ---------------------------------------------------------------------------


class ProviderCredentials(_Frozen):
    api_key: str = Field(..., repr=False)


class ProviderConfig(_Frozen):
    """Credentials per provider. A missing entry means the provider is unavailable."""

    openai: ProviderCredentials | None = None
    anthropic: ProviderCredentials | None = None
    google: ProviderCredentials | None = None
    cohere: ProviderCredentials | None = None
    groq: ProviderCredentials | None = None
    replicate: ProviderCredentials | None = None
    fireworks: ProviderCredentials | None = None
    together: ProviderCredentials | None = None
    deepinfra: ProviderCredentials | None = None

    def available(self) -> list[Provider]:
        """Providers that have credentials configured, in enum order."""
        return [p for p in Provider if getattr(self, p.value) is not None]

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """
        Collect <PROVIDER>_API_KEY variables (OPENAI_API_KEY, GROQ_API_KEY, ...).
        Unset or blank variables leave the provider unconfigured.
        """
        data: dict[str, Any] = {}
        for provider in Provider:
            api_key = read_env(ENV_PROVIDER_KEY_TMPL.format(provider=provider.value.upper()))
            if api_key:
                data[provider.value] = {"api_key": api_key}
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Router model config: one record shape per model family
# ---------------------------------------------------------------------------


def _check_allowed(
    providers: Iterable[Provider],
    allowed: frozenset[Provider],
    model_family: str,
    field: str,
) -> None:
    rejected = [p.value for p in providers if p not in allowed]
    if rejected:
        raise ValueError(
            f"{field} for {model_family} may only contain "
            f"{sorted(p.value for p in allowed)}, got {rejected}"
        )


class FixedProvidersModelConfig(_Frozen):
    """Models served by a single fixed provider list."""

    allowed_providers: ClassVar[frozenset[Provider]] = frozenset()

    providers: tuple[Provider, ...]

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, v: tuple[Provider, ...]) -> tuple[Provider, ...]:
        _check_allowed(v, cls.allowed_providers, cls.__name__, "providers")
        return v


class ToolsProvidersModelConfig(_Frozen):
    """Models whose eligible providers depend on whether the request declares tools."""

    allowed_tools_providers: ClassVar[frozenset[Provider]] = frozenset()
    allowed_no_tools_providers: ClassVar[frozenset[Provider]] = frozenset()

    tools_providers: tuple[Provider, ...]
    no_tools_providers: tuple[Provider, ...]

    @field_validator("tools_providers")
    @classmethod
    def validate_tools_providers(cls, v: tuple[Provider, ...]) -> tuple[Provider, ...]:
        _check_allowed(v, cls.allowed_tools_providers, cls.__name__, "tools_providers")
        return v

    @field_validator("no_tools_providers")
    @classmethod
    def validate_no_tools_providers(cls, v: tuple[Provider, ...]) -> tuple[Provider, ...]:
        _check_allowed(v, cls.allowed_no_tools_providers, cls.__name__, "no_tools_providers")
        return v


class OpenAIModelConfig(FixedProvidersModelConfig):
    allowed_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.OpenAI})


class AnthropicModelConfig(FixedProvidersModelConfig):
    allowed_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Anthropic})


class GoogleModelConfig(FixedProvidersModelConfig):
    allowed_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Google})


class CohereModelConfig(FixedProvidersModelConfig):
    allowed_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Cohere})


_LLAMA_3_1_NO_TOOLS = frozenset(
    {Provider.Groq, Provider.Fireworks, Provider.Together, Provider.DeepInfra}
)


class Llama3_70BModelConfig(ToolsProvidersModelConfig):
    allowed_tools_providers: ClassVar[frozenset[Provider]] = frozenset(
        {Provider.Groq, Provider.DeepInfra}
    )
    allowed_no_tools_providers: ClassVar[frozenset[Provider]] = _LLAMA_3_1_NO_TOOLS | {
        Provider.Replicate
    }


class Llama3_1_8BModelConfig(ToolsProvidersModelConfig):
    allowed_tools_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Groq})
    allowed_no_tools_providers: ClassVar[frozenset[Provider]] = _LLAMA_3_1_NO_TOOLS


class Llama3_1_70BModelConfig(ToolsProvidersModelConfig):
    allowed_tools_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Groq})
    allowed_no_tools_providers: ClassVar[frozenset[Provider]] = _LLAMA_3_1_NO_TOOLS


class Llama3_1_405BModelConfig(ToolsProvidersModelConfig):
    allowed_tools_providers: ClassVar[frozenset[Provider]] = frozenset({Provider.Groq})
    allowed_no_tools_providers: ClassVar[frozenset[Provider]] = _LLAMA_3_1_NO_TOOLS


ModelConfig = FixedProvidersModelConfig | ToolsProvidersModelConfig


class RouterModelConfig(_Frozen):
    """
    Per-model provider preferences plus optional include / exclude filters.

    Field names match LLM member names, so router_model_config.for_model(LLM.gpt_4o)
    returns the gpt_4o entry.
    """

    include_models: tuple[LLM, ...] | None = None
    exclude_models: tuple[LLM, ...] | None = None

    gpt_4o: OpenAIModelConfig | None = None
    gpt_4o_mini: OpenAIModelConfig | None = None
    claude_3_5_sonnet: AnthropicModelConfig | None = None
    claude_3_haiku: AnthropicModelConfig | None = None
    gemini_1_5_pro: GoogleModelConfig | None = None
    gemini_1_5_flash: GoogleModelConfig | None = None
    command_r_plus: CohereModelConfig | None = None
    command_r: CohereModelConfig | None = None
    llama_3_70b: Llama3_70BModelConfig | None = None
    llama_3_1_8b: Llama3_1_8BModelConfig | None = None
    llama_3_1_70b: Llama3_1_70BModelConfig | None = None
    llama_3_1_405b: Llama3_1_405BModelConfig | None = None

    def for_model(self, model: LLM) -> ModelConfig | None:
        return getattr(self, model.name)


DEFAULT_ROUTER_MODEL_CONFIG = RouterModelConfig(
    gpt_4o=OpenAIModelConfig(providers=(Provider.OpenAI,)),
    gpt_4o_mini=OpenAIModelConfig(providers=(Provider.OpenAI,)),
    llama_3_70b=Llama3_70BModelConfig(
        tools_providers=(Provider.Groq, Provider.DeepInfra),
        no_tools_providers=(
            Provider.Groq,
            Provider.Fireworks,
            Provider.Together,
            Provider.DeepInfra,
            Provider.Replicate,
        ),
    ),
    llama_3_1_8b=Llama3_1_8BModelConfig(
        tools_providers=(Provider.Groq,),
        no_tools_providers=(
            Provider.Groq,
            Provider.Fireworks,
            Provider.Together,
            Provider.DeepInfra,
        ),
    ),
    llama_3_1_70b=Llama3_1_70BModelConfig(
        tools_providers=(Provider.Groq,),
        no_tools_providers=(
            Provider.Groq,
            Provider.Fireworks,
            Provider.Together,
            Provider.DeepInfra,
        ),
    ),
    llama_3_1_405b=Llama3_1_405BModelConfig(
        tools_providers=(),
        no_tools_providers=(Provider.Fireworks, Provider.Together, Provider.DeepInfra),
    ),
    claude_3_5_sonnet=AnthropicModelConfig(providers=(Provider.Anthropic,)),
    claude_3_haiku=AnthropicModelConfig(providers=(Provider.Anthropic,)),
    gemini_1_5_pro=GoogleModelConfig(providers=(Provider.Google,)),
    gemini_1_5_flash=GoogleModelConfig(providers=(Provider.Google,)),
    command_r_plus=CohereModelConfig(providers=(Provider.Cohere,)),
    command_r=CohereModelConfig(providers=(Provider.Cohere,)),
)
"""Built-in preference table covering every known model."""


# ---------------------------------------------------------------------------
# Fallback / tools policy
# ---------------------------------------------------------------------------


class FallbackConfig(_Frozen):
    """Fallback policy; enforced by the server, forwarded as-is."""

    fallback_model: LLM | None = None
    max_model_fallback_attempts: int | None = Field(default=None, ge=0)
    max_provider_fallback_attempts: int | None = Field(default=None, ge=0)


class ToolsConfig(_Frozen):
    parallel_tool_use: bool | None = None


# ---------------------------------------------------------------------------
# Client options
# ---------------------------------------------------------------------------


class ClientOptions(_Frozen):
    """
    Everything a Dialtone client captures at construction.

    Instantiate directly or use one of the factory class methods:
      ClientOptions.from_dict(data)
      ClientOptions.from_yaml(path)
      ClientOptions.from_env()
    """

    api_key: str = Field(..., min_length=1, repr=False, description="Dialtone API key.")
    base_url: str = Field(default=DIALTONE_BASE_URL, description="Dialtone API root URL.")
    dials: Dials = Field(default=DEFAULT_DIALS)
    provider_config: ProviderConfig = Field(
        ..., description="Credentials for the upstream providers the router may use."
    )
    router_model_config: RouterModelConfig | None = Field(
        default=DEFAULT_ROUTER_MODEL_CONFIG,
        description="Per-model provider preferences. Pass None to let the server decide.",
    )
    fallback_config: FallbackConfig | None = None
    tools_config: ToolsConfig | None = None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "ClientOptions":
        """Build options from a plain Python dictionary."""
        merged = {**data, **kwargs}
        return cls.model_validate(merged)

    @classmethod
    def from_yaml(cls, path: str, **kwargs: Any) -> "ClientOptions":
        """
        Build options from a YAML file.

        Environment variable interpolation is supported:
          api_key: "${DIALTONE_API_KEY}"
        """
        try:
            import yaml  # type: ignore[import]
        except ImportError as exc:
            raise ImportError(
                "PyYAML is required for from_yaml(). Install it with: pip install 'dialtone[yaml]'"
            ) from exc

        with open(path) as f:
            raw = f.read()

        def _replace(match: re.Match) -> str:  # type: ignore[type-arg]
            var = match.group(1)
            value = os.environ.get(var)
            if value is None:
                raise EnvironmentError(
                    f"Environment variable '{var}' referenced in '{path}' is not set."
                )
            return value.strip()

        raw = re.sub(r"\$\{([^}]+)\}", _replace, raw)
        data = yaml.safe_load(raw) or {}
        return cls.from_dict(data, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "ClientOptions":
        """
        Build options from environment variables.

        Reads:
          DIALTONE_API_KEY   → api_key
          DIALTONE_BASE_URL  → base_url (optional)
          <PROVIDER>_API_KEY → provider_config, e.g. OPENAI_API_KEY, GROQ_API_KEY
        """
        data: dict[str, Any] = {"provider_config": ProviderConfig.from_env()}

        api_key = read_env(ENV_API_KEY)
        if api_key:
            data["api_key"] = api_key

        base_url = read_env(ENV_BASE_URL)
        if base_url:
            data["base_url"] = base_url

        data.update(kwargs)
        return cls.from_dict(data)
