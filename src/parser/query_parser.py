# src/parser/query_parser.py — v1
"""LLM-backed natural-language query parser.

Turns free text into a SearchSpec. Any upstream problem (unreachable
service, timeout, undecodable reply) surfaces as ParseFailure. The
parser makes exactly one attempt and knows nothing about caching.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from trendscout.core.errors import ParseFailure
from trendscout.core.models import (
    DEFAULT_COUNT,
    DEFAULT_MIN_STARS,
    DEFAULT_TIMEFRAME,
    MAX_COUNT,
    TIMEFRAME_WINDOWS,
    SearchSpec,
)
from trendscout.llm.base_client import BaseLLMClient
from trendscout.llm.models import Message
from trendscout.parser.prompt import DEFAULT_SYSTEM_PROMPT, build_user_message

logger = logging.getLogger(__name__)

TIMEFRAME_ALIASES: dict[str, str] = {
    "today": "day",
    "daily": "day",
    "24h": "day",
    "weekly": "week",
    "7d": "week",
    "monthly": "month",
    "30d": "month",
    "quarterly": "quarter",
    "yearly": "year",
    "annual": "year",
    "annually": "year",
}

_NULL_WORDS = {"", "none", "null", "any", "all", "n/a"}


class QueryParser:
    """Parse questions into SearchSpec values through an LLM."""

    def __init__(
        self,
        client: BaseLLMClient,
        system_prompt: str | None = None,
        timeout_s: float = 15.0,
        max_tokens: int = 512,
        temperature: float = 0.0,
    ) -> None:
        self._client = client
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._timeout_s = timeout_s
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def parse(self, raw_text: str) -> SearchSpec:
        """Parse a question.

        Raises:
            ParseFailure: On timeout, provider error or undecodable output.
        """
        messages = [Message(role="user", content=build_user_message(raw_text))]
        try:
            response = await asyncio.wait_for(
                self._client.complete(
                    messages,
                    system=self._system_prompt,
                    max_tokens=self._max_tokens,
                    temperature=self._temperature,
                    json_output=True,
                ),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise ParseFailure(f"Query parser timed out after {self._timeout_s}s") from e
        except Exception as e:
            raise ParseFailure(f"Query parser unavailable: {e}") from e

        logger.debug("Parser raw response: %s", response.content)
        spec = decode_search_spec(response.content)
        logger.info("Parsed parameters: %s", spec.model_dump())
        return spec


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` wrapping that models like to add."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def decode_search_spec(text: str) -> SearchSpec:
    """Decode parser output into a SearchSpec, applying defaults.

    Raises:
        ParseFailure: If the text is not a JSON object or a field has the
            wrong type.
    """
    try:
        payload = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Parser output is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ParseFailure(f"Parser output must be a JSON object, got {type(payload).__name__}")

    count = _int_field(payload, "count", DEFAULT_COUNT)
    min_stars = _int_field(payload, "min_stars", DEFAULT_MIN_STARS, alias="minStars")

    return SearchSpec(
        keyword=_text_field(payload, "keyword"),
        language=_text_field(payload, "language"),
        topics=tuple(_topics_field(payload)),
        timeframe=_timeframe_field(payload),
        min_stars=max(0, min_stars),
        count=min(MAX_COUNT, max(1, count)),
    )


# --- Field decoders ---


def _text_field(payload: dict[str, Any], name: str) -> str | None:
    value = payload.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseFailure(f"Field {name!r} must be a string")
    if value.strip().lower() in _NULL_WORDS:
        return None
    return value.strip()


def _topics_field(payload: dict[str, Any]) -> list[str]:
    value = payload.get("topics")
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise ParseFailure("Field 'topics' must be a list of strings")
    return [t.strip() for t in value if t.strip()]


def _timeframe_field(payload: dict[str, Any]) -> str:
    value = payload.get("timeframe")
    if value is None:
        return DEFAULT_TIMEFRAME
    if not isinstance(value, str):
        raise ParseFailure("Field 'timeframe' must be a string")
    key = value.strip().lower()
    key = TIMEFRAME_ALIASES.get(key, key)
    if key not in TIMEFRAME_WINDOWS:
        logger.warning("Unknown timeframe %r, using %s", value, DEFAULT_TIMEFRAME)
        return DEFAULT_TIMEFRAME
    return key


def _int_field(
    payload: dict[str, Any], name: str, default: int, alias: str | None = None
) -> int:
    value = payload.get(name)
    if value is None and alias is not None:
        value = payload.get(alias)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ParseFailure(f"Field {name!r} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ParseFailure(f"Field {name!r} must be an integer")
