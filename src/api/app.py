# src/api/app.py — v1
"""FastAPI application exposing /health and /trending."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from trendscout.a2a.handler import handle_request
from trendscout.a2a.models import A2AResponse
from trendscout.api.state import AppState, build_state
from trendscout.config.settings import Settings
from trendscout.core.errors import (
    INVALID_JSON,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    NO_DATA_AVAILABLE,
)
from trendscout.logging.context import clear_context
from trendscout.version import __version__

logger = logging.getLogger(__name__)

_CLIENT_ERRORS = {INVALID_JSON, INVALID_REQUEST, METHOD_NOT_FOUND, INVALID_PARAMS}


def http_status_for(response: A2AResponse) -> int:
    """HTTP status for an envelope: 200 on success, mapped from the error code otherwise."""
    if response.error is None:
        return 200
    if response.error.code in _CLIENT_ERRORS:
        return 400
    if response.error.code == NO_DATA_AVAILABLE:
        return 503
    return 500


def create_app(settings: Settings | None = None, state: AppState | None = None) -> FastAPI:
    """Build the application. A prebuilt state skips component wiring."""
    settings = settings or (state.settings if state else Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_state = state or build_state(settings)
        app.state.trendscout = app_state
        if app_state.scheduler is not None:
            app_state.scheduler.start()
        try:
            yield
        finally:
            await app_state.aclose()

    app = FastAPI(title="trendscout", version=__version__, lifespan=lifespan)

    origins = settings.cors_allowed_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["content-type", "cookie", "cache-control"],
            allow_credentials=True,
        )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        limiter = request.app.state.trendscout.rate_limiter
        client_key = request.client.host if request.client else "unknown"
        if not limiter.allow(client_key):
            logger.warning("Rate limit exceeded for %s", client_key)
            return Response(
                status_code=429, headers={"Retry-After": str(int(limiter.window_s))}
            )
        return await call_next(request)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "OK"}

    @app.post("/trending")
    async def get_trending(request: Request) -> JSONResponse:
        app_state: AppState = request.app.state.trendscout
        body = await request.body()
        try:
            response = await handle_request(body, app_state.pipeline)
        finally:
            clear_context()
        return JSONResponse(response.to_payload(), status_code=http_status_for(response))

    return app
