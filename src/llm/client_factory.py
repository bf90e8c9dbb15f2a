# src/llm/client_factory.py — v3
"""Factory: instantiate the parser's LLM client from a provider name."""

from __future__ import annotations

import importlib
import logging

from trendscout.config.settings import Settings
from trendscout.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "google": "trendscout.llm.adapters.google_adapter.GoogleAdapter",
    "anthropic": "trendscout.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "ollama": "trendscout.llm.adapters.ollama_adapter.OllamaAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (google, anthropic, ollama).
        model: Model name (e.g. gemini-1.5-flash).
        settings: Application settings (for API keys and hosts).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model

    if settings is not None:
        if provider == "google":
            init_kwargs.setdefault("api_key", settings.google_api_key)
        elif provider == "anthropic":
            init_kwargs.setdefault("api_key", settings.anthropic_api_key)
        elif provider == "ollama":
            init_kwargs.setdefault("host", settings.ollama_base_url)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def create_parser_client(settings: Settings) -> BaseLLMClient:
    """Build the LLM client configured for query parsing."""
    return create_llm_client(settings.llm_provider, settings.llm_model, settings)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter by fully qualified class path."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
