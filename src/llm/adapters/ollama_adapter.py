# src/llm/adapters/ollama_adapter.py — v2
"""Ollama local LLM adapter implementing BaseLLMClient.

Uses the ollama Python SDK.
"""

from __future__ import annotations

import time
from typing import Any

from trendscout.llm.base_client import BaseLLMClient
from trendscout.llm.models import LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self, model: str = "llama3", host: str = "http://localhost:11434", **kwargs: Any,
    ):
        self._model = model
        self._host = host

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.0,
        json_output: bool = False,
    ) -> LLMResponse:
        try:
            import ollama
        except ImportError as e:
            raise ImportError("ollama package required: pip install ollama") from e

        client = ollama.AsyncClient(host=self._host)
        msgs: list[dict[str, str]] = []
        if system:
            msgs.append({"role": "system", "content": system})
        msgs.extend({"role": m.role, "content": m.content} for m in messages)

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": msgs,
            "options": {"num_predict": max_tokens, "temperature": temperature},
        }
        if json_output:
            kwargs["format"] = "json"

        t0 = time.monotonic()
        resp = await client.chat(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        return LLMResponse(
            content=resp["message"]["content"],
            input_tokens=resp.get("prompt_eval_count", 0) or 0,
            output_tokens=resp.get("eval_count", 0) or 0,
            model=self._model,
            provider="ollama",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"
