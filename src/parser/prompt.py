# src/parser/prompt.py — v1
"""Default system prompt for the query parser."""

from __future__ import annotations

DEFAULT_SYSTEM_PROMPT = """\
You convert questions about trending GitHub repositories into search parameters.

Return a JSON object with these fields:
- "keyword": free-text search term, or null when the question only names a language or topics
- "language": programming language in lower case (e.g. "rust", "python"), or null
- "topics": list of GitHub topic slugs (e.g. ["machine-learning"]), possibly empty
- "timeframe": one of "day", "week", "month", "quarter", "year"
- "min_stars": minimum star count, an integer
- "count": number of repositories to return, an integer between 1 and 20

Defaults when the question does not say: timeframe "week", min_stars 10,
count 5, language null, topics [].

Return only the JSON object.
"""


def build_user_message(raw_text: str) -> str:
    """Wrap the user's question for the parser prompt."""
    return f'Query: "{raw_text.strip()}"'
