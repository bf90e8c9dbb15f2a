# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from trendscout.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.0,
        json_output: bool = False,
    ) -> LLMResponse:
        """Text completion. json_output asks the provider for a JSON body."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, anthropic, ollama)."""
