# tests/unit/llm/test_client_factory.py — v2
"""Tests for llm/client_factory.py and the adapter interface."""

from __future__ import annotations

import pytest

from trendscout.config.settings import Settings
from trendscout.llm.adapters.anthropic_adapter import AnthropicAdapter
from trendscout.llm.adapters.google_adapter import GoogleAdapter
from trendscout.llm.adapters.ollama_adapter import OllamaAdapter
from trendscout.llm.base_client import BaseLLMClient
from trendscout.llm.client_factory import (
    _PROVIDER_REGISTRY,
    UnsupportedProviderError,
    create_llm_client,
    create_parser_client,
    register_provider,
)
from trendscout.llm.models import LLMResponse, Message


class TestBaseClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]


class TestModels:
    def test_message_roles(self):
        assert Message(role="user", content="hi").role == "user"
        with pytest.raises(ValueError):
            Message(role="system", content="hi")  # type: ignore[arg-type]

    def test_response_defaults(self):
        r = LLMResponse(content="{}", model="m", provider="p")
        assert r.input_tokens == 0
        assert r.raw_response is None


class TestCreateLLMClient:
    @pytest.mark.parametrize(
        "provider,cls",
        [("google", GoogleAdapter), ("anthropic", AnthropicAdapter), ("ollama", OllamaAdapter)],
    )
    def test_known_providers(self, provider, cls):
        client = create_llm_client(provider, "some-model")
        assert isinstance(client, cls)
        assert client.provider_name == provider

    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("openai", "gpt")

    def test_google_key_from_settings(self):
        s = Settings(_env_file=None, google_api_key="g-key")
        client = create_llm_client("google", "gemini-1.5-flash", s)
        assert client._api_key == "g-key"

    def test_ollama_host_from_settings(self):
        s = Settings(_env_file=None, ollama_base_url="http://ollama:11434")
        client = create_llm_client("ollama", "llama3", s)
        assert client._host == "http://ollama:11434"

    def test_parser_client_uses_configured_provider(self):
        s = Settings(_env_file=None, llm_provider="anthropic", llm_model="claude-3-5-haiku-latest")
        client = create_parser_client(s)
        assert isinstance(client, AnthropicAdapter)
        assert client._model == "claude-3-5-haiku-latest"


class TestRegisterProvider:
    @pytest.fixture
    def custom_provider(self):
        register_provider("local-llama", "trendscout.llm.adapters.ollama_adapter.OllamaAdapter")
        yield "local-llama"
        _PROVIDER_REGISTRY.pop("local-llama", None)

    def test_registered_provider_selectable_from_settings(self, custom_provider):
        s = Settings(_env_file=None, llm_provider=" Local-Llama ", llm_model="llama3")
        assert s.llm_provider == custom_provider
        client = create_parser_client(s)
        assert isinstance(client, OllamaAdapter)
        assert client._model == "llama3"

    def test_unregistered_provider_rejected_at_wiring(self):
        s = Settings(_env_file=None, llm_provider="nonexistent")
        with pytest.raises(UnsupportedProviderError, match="nonexistent"):
            create_parser_client(s)
