# tests/test_config.py
"""
Tests for ClientOptions and the routing preference records.

Verifies:
  - Defaults (base URL, dials, router preference table).
  - Per-family provider validation of the router model config.
  - from_dict / from_yaml / from_env factories.
  - Immutability of options and defaults.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dialtone import (
    DEFAULT_ROUTER_MODEL_CONFIG,
    LLM,
    ClientOptions,
    Dials,
    Provider,
    ProviderConfig,
    RouterModelConfig,
)
from dialtone.config import (
    DEFAULT_DIALS,
    AnthropicModelConfig,
    FixedProvidersModelConfig,
    Llama3_70BModelConfig,
    Llama3_1_8BModelConfig,
    OpenAIModelConfig,
    ToolsProvidersModelConfig,
)
from dialtone.constants import DIALTONE_BASE_URL

PROVIDER_ENV_VARS = [f"{p.value.upper()}_API_KEY" for p in Provider]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ["DIALTONE_API_KEY", "DIALTONE_BASE_URL", *PROVIDER_ENV_VARS]:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, provider_config):
        options = ClientOptions(api_key="k", provider_config=provider_config)
        assert options.base_url == DIALTONE_BASE_URL
        assert options.dials == Dials(quality=0.5, cost=0.5)
        assert options.dials.speed is None
        assert options.router_model_config == DEFAULT_ROUTER_MODEL_CONFIG
        assert options.fallback_config is None
        assert options.tools_config is None

    def test_api_key_required(self, provider_config):
        with pytest.raises(ValidationError):
            ClientOptions(provider_config=provider_config)  # type: ignore[call-arg]
        with pytest.raises(ValidationError):
            ClientOptions(api_key="", provider_config=provider_config)

    def test_provider_config_required(self):
        with pytest.raises(ValidationError):
            ClientOptions(api_key="k")  # type: ignore[call-arg]

    def test_trailing_slash_stripped(self, provider_config):
        options = ClientOptions(
            api_key="k", base_url="http://localhost:8000/", provider_config=provider_config
        )
        assert options.base_url == "http://localhost:8000"

    def test_router_model_config_can_be_disabled(self, provider_config):
        options = ClientOptions(
            api_key="k", provider_config=provider_config, router_model_config=None
        )
        assert options.router_model_config is None

    def test_api_key_not_in_repr(self, provider_config):
        options = ClientOptions(api_key="secret-key", provider_config=provider_config)
        assert "secret-key" not in repr(options)
        assert "sk-test-openai" not in repr(options)

    def test_default_table_covers_every_model(self):
        for model in LLM:
            assert DEFAULT_ROUTER_MODEL_CONFIG.for_model(model) is not None

    def test_default_table_shapes(self):
        assert isinstance(DEFAULT_ROUTER_MODEL_CONFIG.gpt_4o, FixedProvidersModelConfig)
        assert isinstance(DEFAULT_ROUTER_MODEL_CONFIG.llama_3_70b, ToolsProvidersModelConfig)
        assert DEFAULT_ROUTER_MODEL_CONFIG.llama_3_1_405b.tools_providers == ()

    def test_options_and_defaults_are_frozen(self, provider_config):
        options = ClientOptions(api_key="k", provider_config=provider_config)
        with pytest.raises(ValidationError):
            options.api_key = "other"
        with pytest.raises(ValidationError):
            DEFAULT_DIALS.quality = 1.0
        with pytest.raises(ValidationError):
            DEFAULT_ROUTER_MODEL_CONFIG.gpt_4o = None


class TestRouterModelConfig:
    def test_fixed_family_accepts_its_provider(self):
        cfg = OpenAIModelConfig(providers=["openai"])
        assert cfg.providers == (Provider.OpenAI,)

    def test_fixed_family_rejects_other_provider(self):
        with pytest.raises(ValidationError):
            AnthropicModelConfig(providers=[Provider.OpenAI])

    def test_tools_family_validates_both_lists(self):
        Llama3_70BModelConfig(
            tools_providers=["groq", "deepinfra"], no_tools_providers=["replicate"]
        )
        with pytest.raises(ValidationError):
            Llama3_1_8BModelConfig(tools_providers=["deepinfra"], no_tools_providers=[])
        with pytest.raises(ValidationError):
            Llama3_1_8BModelConfig(tools_providers=[], no_tools_providers=["replicate"])

    def test_model_entry_must_match_family(self):
        with pytest.raises(ValidationError):
            RouterModelConfig.model_validate({"gpt_4o": {"providers": ["anthropic"]}})
        with pytest.raises(ValidationError):
            RouterModelConfig.model_validate({"llama_3_70b": {"providers": ["groq"]}})

    def test_include_exclude_models(self):
        cfg = RouterModelConfig(
            include_models=["command-r", "gpt-4o-mini-2024-07-18"],
            exclude_models=[LLM.llama_3_1_405b],
        )
        assert cfg.include_models == (LLM.command_r, LLM.gpt_4o_mini)
        assert cfg.exclude_models == (LLM.llama_3_1_405b,)
        assert cfg.for_model(LLM.gpt_4o) is None

    def test_unknown_model_rejected(self):
        with pytest.raises(ValidationError):
            RouterModelConfig(include_models=["gpt-5"])


class TestProviderConfig:
    def test_available(self, provider_config):
        assert provider_config.available() == [Provider.OpenAI, Provider.Groq]

    def test_empty(self):
        assert ProviderConfig().available() == []


class TestFactories:
    def test_from_dict(self):
        options = ClientOptions.from_dict(
            {
                "api_key": "k",
                "provider_config": {"openai": {"api_key": "sk"}},
                "dials": {"quality": 0.8, "cost": 0.2, "speed": 0.5},
                "fallback_config": {"fallback_model": "gpt-4o-mini-2024-07-18"},
                "tools_config": {"parallel_tool_use": True},
            }
        )
        assert options.dials.speed == 0.5
        assert options.fallback_config.fallback_model is LLM.gpt_4o_mini
        assert options.tools_config.parallel_tool_use is True

    def test_from_dict_kwargs_override(self):
        options = ClientOptions.from_dict(
            {"api_key": "k", "provider_config": {}}, base_url="http://localhost:8000"
        )
        assert options.base_url == "http://localhost:8000"

    def test_from_yaml_interpolates_env(self, tmp_path, clean_env):
        clean_env.setenv("DIALTONE_API_KEY", " dt-from-env ")
        clean_env.setenv("OPENAI_API_KEY", "sk-from-env")
        path = tmp_path / "dialtone.yaml"
        path.write_text(
            "api_key: ${DIALTONE_API_KEY}\n"
            "base_url: http://localhost:8000\n"
            "provider_config:\n"
            "  openai:\n"
            "    api_key: ${OPENAI_API_KEY}\n"
            "router_model_config:\n"
            "  include_models: [gpt-4o-2024-05-13]\n"
        )
        options = ClientOptions.from_yaml(str(path))
        assert options.api_key == "dt-from-env"
        assert options.provider_config.openai.api_key == "sk-from-env"
        assert options.router_model_config.include_models == (LLM.gpt_4o,)

    def test_from_yaml_missing_env_var(self, tmp_path, clean_env):
        path = tmp_path / "dialtone.yaml"
        path.write_text("api_key: ${DIALTONE_API_KEY}\nprovider_config: {}\n")
        with pytest.raises(EnvironmentError):
            ClientOptions.from_yaml(str(path))

    def test_from_env(self, clean_env):
        clean_env.setenv("DIALTONE_API_KEY", "dt-key\n")
        clean_env.setenv("DIALTONE_BASE_URL", "http://localhost:8000")
        clean_env.setenv("OPENAI_API_KEY", "sk-openai")
        clean_env.setenv("FIREWORKS_API_KEY", "  fw-key  ")
        clean_env.setenv("GROQ_API_KEY", "   ")
        options = ClientOptions.from_env()
        assert options.api_key == "dt-key"
        assert options.base_url == "http://localhost:8000"
        assert options.provider_config.available() == [Provider.OpenAI, Provider.Fireworks]
        assert options.provider_config.fireworks.api_key == "fw-key"

    def test_from_env_without_api_key_fails(self, clean_env):
        with pytest.raises(ValidationError):
            ClientOptions.from_env()
