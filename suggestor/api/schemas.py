"""Pydantic response schemas for the HTTP layer.

The suggestion request/response bodies are the domain models themselves
(:class:`SuggestionRequest`, :class:`SuggestionResponse`); only the
service-level endpoints need their own shapes.
"""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


class ComponentHealth(BaseModel):
    """Health of one dependency; ``message`` only present when unhealthy."""

    healthy: bool
    message: str | None = None


class VersionResponse(BaseModel):
    """Build information for the running service."""

    build: str
    python_version: str
    git_commit: str
