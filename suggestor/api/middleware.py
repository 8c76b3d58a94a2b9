"""API middleware -- CORS, gzip, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, response compression, structured request logging (via
structlog), and automatic conversion of ``SuggestorError`` subclasses into
JSON ``ErrorResponse`` bodies.

# --- MIDDLEWARE EXECUTION ORDER ----------------------------------------
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # innermost
#     app.add_middleware(RequestLoggingMiddleware)
#     configure_compression(app)
#     configure_cors(app)                           # outermost
#
#   Request flow:
#     Client -> CORS -> GZip -> RequestLogging -> ErrorHandling -> route
#
# So RequestLoggingMiddleware sees the *final* status code, even when
# ErrorHandling replaced an exception with a structured JSON error.
# -----------------------------------------------------------------------
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from suggestor.api.schemas import ErrorResponse
from suggestor.utils.errors import SuggestorError
from suggestor.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS / compression
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware allowing credentials and the Authorization header.

    ``allowed_origins`` defaults to ``["*"]``; Starlette echoes the caller's
    origin back when credentials are allowed.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
    )


def configure_compression(app: FastAPI, *, minimum_size: int = 500) -> None:
    """Gzip responses larger than ``minimum_size`` bytes."""
    app.add_middleware(GZipMiddleware, minimum_size=minimum_size)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch escaped ``SuggestorError`` subclasses and return structured JSON.

    Suggestion failures are normally recovered inside the orchestrator; this
    is the backstop for anything that is not (for example a configuration
    error raised while handling a request).  Stack traces stay in the logs.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except SuggestorError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
            )
            return JSONResponse(
                status_code=500,
                content=body.model_dump(),
            )
