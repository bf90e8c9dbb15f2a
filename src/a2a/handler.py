# src/a2a/handler.py — v1
"""Inbound envelope validation and task execution.

Every outcome, including malformed input and unexpected errors, is
returned as an A2AResponse. Malformed envelopes never reach the pipeline.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from trendscout.a2a.models import A2ARequest, A2AResponse
from trendscout.a2a.task import TaskRecord
from trendscout.core.errors import (
    INTERNAL_ERROR,
    INVALID_JSON,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    InvalidRequest,
    NoDataAvailable,
)
from trendscout.logging.context import set_request_context

if TYPE_CHECKING:
    from trendscout.service.pipeline import Resolution, ResolutionPipeline

logger = logging.getLogger(__name__)

SUPPORTED_METHOD = "message/send"
INTERNAL_SUGGESTION = "An unexpected error occurred. Please try again later."

# Resolutions outlive abandoned callers; hold references until they finish.
_inflight: set[asyncio.Future] = set()


def parse_envelope(body: bytes | str | dict[str, Any]) -> A2ARequest:
    """Validate a raw request body.

    Raises:
        InvalidRequest: With the error code matching the first problem found.
    """
    payload = body if isinstance(body, dict) else _decode_json(body)

    if not isinstance(payload, dict):
        raise InvalidRequest(INVALID_REQUEST, "Request must be a JSON object")
    if not payload:
        raise InvalidRequest(INVALID_REQUEST, "Empty JSON object received")

    try:
        request = A2ARequest.model_validate(payload)
    except ValidationError as e:
        logger.error("Request validation error: %s", e)
        raise InvalidRequest(
            INVALID_PARAMS,
            "Required fields may be missing or have wrong types",
            suggestion="Send a message/send request with params.message.parts containing a text part.",
        ) from e

    if request.jsonrpc != "2.0":
        raise InvalidRequest(INVALID_PARAMS, "Invalid params: jsonrpc must be '2.0'")
    if request.method != SUPPORTED_METHOD:
        raise InvalidRequest(
            METHOD_NOT_FOUND,
            "Method not found",
            suggestion=f"Use method '{SUPPORTED_METHOD}'.",
        )
    return request


def extract_query_text(request: A2ARequest) -> str:
    text = request.params.message.first_text()
    if text is None:
        raise InvalidRequest(
            INVALID_PARAMS,
            "No message text found",
            suggestion="Ask a question such as 'Trending Rust projects this week'.",
        )
    return text


async def handle_request(
    body: bytes | str | dict[str, Any], pipeline: ResolutionPipeline
) -> A2AResponse:
    """Validate, resolve and render one inbound request."""
    request_id = _peek_request_id(body)
    try:
        request = parse_envelope(body)
        text = extract_query_text(request)
    except InvalidRequest as e:
        logger.warning("Rejected request %s: %s", request_id, e.message)
        return A2AResponse.failure(request_id, e.code, e.message, e.suggestion)

    task = TaskRecord(request.id, request.params.message)
    set_request_context(str(request.id), task.id)
    logger.info("User query: %s", text)

    task.start()
    try:
        resolution = await _resolve_shielded(pipeline, text)
    except NoDataAvailable as e:
        logger.warning("No data available: %s", e)
        task.fail(e.code, "Failed to fetch trending repositories", e.suggestion)
    except InvalidRequest as e:
        task.fail(e.code, e.message, e.suggestion)
    except Exception:
        logger.exception("Unexpected error while resolving request %s", request.id)
        task.fail(INTERNAL_ERROR, "Internal error", INTERNAL_SUGGESTION)
    else:
        task.complete(resolution.text)
        logger.info(
            "Sending response with %d repos (parse=%s, search=%s)",
            len(resolution.repositories), resolution.parse_source, resolution.search_source,
        )

    return task.to_response()


async def _resolve_shielded(pipeline: ResolutionPipeline, text: str) -> Resolution:
    """Run the pipeline so that caller cancellation does not abort it."""
    future = asyncio.ensure_future(pipeline.resolve(text))
    _inflight.add(future)
    future.add_done_callback(_inflight.discard)
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        future.add_done_callback(_log_abandoned_outcome)
        raise


def _log_abandoned_outcome(future: asyncio.Future) -> None:
    """Retrieve the outcome of a resolution whose caller went away."""
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.warning(
            "Resolution for abandoned request failed: %s: %s", type(exc).__name__, exc
        )
    else:
        logger.info("Resolution for abandoned request completed")


def _decode_json(body: bytes | str) -> Any:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        raise InvalidRequest(INVALID_REQUEST, "Empty request received")
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidRequest(
            INVALID_JSON,
            "Parse error: Invalid JSON",
            suggestion="Send a valid JSON-RPC 2.0 body.",
        ) from e


def _peek_request_id(body: bytes | str | dict[str, Any]) -> str | int | None:
    """Best-effort request id for error envelopes."""
    if isinstance(body, dict):
        payload: Any = body
    else:
        try:
            payload = json.loads(body or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
    if isinstance(payload, dict) and isinstance(payload.get("id"), (str, int)):
        return payload["id"]
    return None
