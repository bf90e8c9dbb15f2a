# tests/unit/a2a/test_handler.py — v1
"""Tests for a2a/handler.py — envelope validation and outcome mapping."""

from __future__ import annotations

import asyncio
import logging
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from trendscout.a2a import handler as handler_module
from trendscout.a2a.handler import extract_query_text, handle_request, parse_envelope
from trendscout.core.errors import (
    INTERNAL_ERROR,
    INVALID_JSON,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    InvalidRequest,
    NoDataAvailable,
    RateLimited,
)
from trendscout.logging.context import clear_context


@pytest.fixture(autouse=True)
def _clear_log_context():
    yield
    clear_context()


class TestParseEnvelope:
    @pytest.mark.parametrize(
        "body,code",
        [
            (b"", INVALID_REQUEST),
            (b"   ", INVALID_REQUEST),
            (b"{not json", INVALID_JSON),
            (b"[1, 2]", INVALID_REQUEST),
            (b"{}", INVALID_REQUEST),
            (b'{"jsonrpc": "2.0", "id": "1", "method": "message/send"}', INVALID_PARAMS),
        ],
    )
    def test_rejections(self, body, code):
        with pytest.raises(InvalidRequest) as exc:
            parse_envelope(body)
        assert exc.value.code == code

    def test_wrong_method(self, make_request):
        with pytest.raises(InvalidRequest) as exc:
            parse_envelope(make_request(method="tasks/get"))
        assert exc.value.code == METHOD_NOT_FOUND

    def test_wrong_jsonrpc_version(self, make_request):
        payload = make_request()
        payload["jsonrpc"] = "1.0"
        with pytest.raises(InvalidRequest) as exc:
            parse_envelope(json.dumps(payload))
        assert exc.value.code == INVALID_PARAMS

    def test_missing_jsonrpc_version(self, make_request):
        payload = make_request()
        del payload["jsonrpc"]
        with pytest.raises(InvalidRequest) as exc:
            parse_envelope(payload)
        assert exc.value.code == INVALID_PARAMS

    def test_accepts_bytes(self, make_request):
        req = parse_envelope(json.dumps(make_request()).encode())
        assert req.method == "message/send"

    def test_no_text(self, make_request):
        payload = make_request()
        payload["params"]["message"]["parts"] = [{"kind": "data", "data": {}}]
        with pytest.raises(InvalidRequest, match="No message text"):
            extract_query_text(parse_envelope(payload))


class TestHandleRequest:
    @pytest.mark.asyncio
    async def test_success(self, make_request, pipeline):
        response = await handle_request(make_request(task_id="task-7"), pipeline)
        payload = response.to_payload()

        assert payload["id"] == "req-001"
        assert payload["result"]["id"] == "task-7"
        assert payload["result"]["status"]["state"] == "completed"
        text = payload["result"]["status"]["message"]["parts"][0]["text"]
        assert text.startswith("Trending on GitHub (language: rust, week)")
        assert [m["role"] for m in payload["result"]["history"]] == ["user", "agent"]

    @pytest.mark.asyncio
    async def test_invalid_json_never_reaches_pipeline(self):
        pipeline = MagicMock()
        pipeline.resolve = AsyncMock()
        response = await handle_request(b"{oops", pipeline)
        assert response.error.code == INVALID_JSON
        assert response.id is None
        pipeline.resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_echoes_request_id(self, make_request):
        pipeline = MagicMock()
        response = await handle_request(make_request(method="bogus", request_id="abc"), pipeline)
        assert response.id == "abc"
        assert response.error.code == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_no_data_available(self, make_request, pipeline, mock_executor):
        mock_executor.execute.side_effect = RateLimited("quota", status_code=429)
        payload = (await handle_request(make_request(), pipeline)).to_payload()
        assert payload["error"]["code"] == -32001
        assert payload["error"]["message"] == "Failed to fetch trending repositories"
        assert payload["error"]["data"]["suggestion"] == NoDataAvailable.suggestion

    @pytest.mark.asyncio
    async def test_stale_success(self, make_request, pipeline, mock_executor, clock):
        await handle_request(make_request(), pipeline)
        clock.advance(hours=8)
        mock_executor.execute.side_effect = RateLimited("quota", status_code=403)
        payload = (await handle_request(make_request(request_id="req-002"), pipeline)).to_payload()
        text = payload["result"]["status"]["message"]["parts"][0]["text"]
        assert "[cached, may be stale]" in text.splitlines()[0]

    @pytest.mark.asyncio
    async def test_blank_text(self, make_request, pipeline):
        response = await handle_request(make_request(text="   "), pipeline)
        assert response.error.code == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, make_request, pipeline, mock_executor):
        mock_executor.execute.side_effect = KeyError("boom")
        response = await handle_request(make_request(), pipeline)
        assert response.error.code == INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_caller_cancellation_does_not_abort_resolution(self, make_request):
        finished = asyncio.Event()
        release = asyncio.Event()

        async def slow_resolve(text):
            await release.wait()
            finished.set()
            return MagicMock(text="ok", repositories=(), parse_source="parser", search_source="upstream")

        pipeline = MagicMock()
        pipeline.resolve = slow_resolve

        caller = asyncio.ensure_future(handle_request(make_request(), pipeline))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        assert len(handler_module._inflight) == 1
        pending = next(iter(handler_module._inflight))
        release.set()
        await asyncio.wait_for(pending, timeout=1)
        await asyncio.sleep(0)
        assert finished.is_set()
        assert handler_module._inflight == set()

    @pytest.mark.asyncio
    async def test_abandoned_failure_is_retrieved_and_logged(self, make_request, caplog):
        release = asyncio.Event()

        async def failing_resolve(text):
            await release.wait()
            raise NoDataAvailable("nothing cached")

        pipeline = MagicMock()
        pipeline.resolve = failing_resolve

        caller = asyncio.ensure_future(handle_request(make_request(), pipeline))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        pending = next(iter(handler_module._inflight))
        with caplog.at_level(logging.WARNING, logger="trendscout.a2a.handler"):
            release.set()
            done, _ = await asyncio.wait({pending}, timeout=1)
            await asyncio.sleep(0)

        assert pending in done
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("abandoned request failed: NoDataAvailable" in r.getMessage() for r in warnings)
        assert handler_module._inflight == set()
