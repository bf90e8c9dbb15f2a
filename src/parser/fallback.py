# src/parser/fallback.py — v1
"""Rule-based keyword extraction used when the LLM parser fails.

Stop-words are dropped, a recognized programming language is lifted into
``language`` and a recognized period word into ``timeframe``; whatever is
left becomes a single keyword. Everything else takes the parser defaults.
"""

from __future__ import annotations

import re

from trendscout.core.models import SearchSpec

STOP_WORDS = frozenset(
    {
        "a", "about", "all", "an", "and", "any", "are", "best", "by", "can",
        "find", "for", "from", "get", "github", "give", "hot", "i", "in",
        "is", "last", "latest", "list", "me", "most", "new", "of", "on",
        "past", "popular", "project", "projects", "please", "repo", "repos",
        "repositories", "repository", "s", "show", "some", "starred", "stars",
        "tell", "that", "the", "this", "to", "top", "trending", "up", "what",
        "whats", "which", "with", "written",
    }
)

LANGUAGES: dict[str, str] = {
    "c": "c",
    "c#": "c#",
    "c++": "c++",
    "cpp": "c++",
    "csharp": "c#",
    "dart": "dart",
    "elixir": "elixir",
    "go": "go",
    "golang": "go",
    "haskell": "haskell",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "kotlin": "kotlin",
    "lua": "lua",
    "php": "php",
    "python": "python",
    "ruby": "ruby",
    "rust": "rust",
    "scala": "scala",
    "shell": "shell",
    "swift": "swift",
    "typescript": "typescript",
    "ts": "typescript",
    "zig": "zig",
}

PERIOD_WORDS: dict[str, str] = {
    "today": "day",
    "day": "day",
    "daily": "day",
    "yesterday": "day",
    "week": "week",
    "weekly": "week",
    "month": "month",
    "monthly": "month",
    "quarter": "quarter",
    "year": "year",
    "yearly": "year",
}

_TOKEN = re.compile(r"\w[\w+#.\-]*")


def tokenize(raw_text: str) -> list[str]:
    """Lower-case word tokens, keeping language names like c++ and c# intact."""
    return [t.rstrip(".") for t in _TOKEN.findall(raw_text.lower())]


def extract_search_spec(raw_text: str) -> SearchSpec:
    """Build a SearchSpec from raw text without any upstream call."""
    language: str | None = None
    timeframe = None
    words: list[str] = []

    for token in tokenize(raw_text):
        if language is None and token in LANGUAGES:
            language = LANGUAGES[token]
            continue
        if token in PERIOD_WORDS:
            timeframe = timeframe or PERIOD_WORDS[token]
            continue
        if token in STOP_WORDS:
            continue
        words.append(token)

    fields: dict[str, object] = {"keyword": " ".join(words) or None, "language": language}
    if timeframe is not None:
        fields["timeframe"] = timeframe
    return SearchSpec(**fields)
