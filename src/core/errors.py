# src/core/errors.py — v1
"""Error taxonomy and the caller-visible error codes.

Codes follow JSON-RPC conventions and are stable across releases: each
failure kind owns exactly one code.
"""

from __future__ import annotations

# === ERROR CODES ===

INVALID_JSON = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
NO_DATA_AVAILABLE = -32001


class TrendscoutError(Exception):
    """Base class for all trendscout errors."""


class ParseFailure(TrendscoutError):
    """The natural-language parser could not produce a SearchSpec."""


class UpstreamUnavailable(TrendscoutError):
    """The search API could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimited(UpstreamUnavailable):
    """The search API reported quota exhaustion."""


class MalformedResponse(TrendscoutError):
    """The search API answered with a payload that could not be decoded."""


class NoDataAvailable(TrendscoutError):
    """Search failed and no cached result exists for the query."""

    code = NO_DATA_AVAILABLE
    suggestion = "GitHub search is temporarily unavailable. Please try again in a few minutes."


class InvalidRequest(TrendscoutError):
    """An inbound envelope failed validation."""

    def __init__(
        self, code: int, message: str, suggestion: str = "Check the request format and retry."
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


class DeliveryFailed(TrendscoutError):
    """The external channel rejected or did not receive a digest."""
