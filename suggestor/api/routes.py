"""FastAPI routes for the author suggestor.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.

# --- API ROUTE MAP -----------------------------------------------------
#
# Endpoint               Method  Auth    Description
# ---------------------------------------------------------------------
# /api/suggest           POST    bearer  Full pipeline (baseline + AI)
# /api/suggest/author    POST    bearer  Backend-only author suggestions
# /healthcheck           GET     none    Solr ping; 200 healthy / 500 not
# /version               GET     none    Build tag, python version, commit
# /favicon.ico           GET     none    Empty 204 for browsers
#
# Suggestion endpoints always answer 200 with a (possibly empty) list;
# only a malformed request body is a client-visible failure (400).
# -----------------------------------------------------------------------
"""

from __future__ import annotations

import glob
import platform
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from suggestor.api.auth import ClaimsDep
from suggestor.api.schemas import ComponentHealth, VersionResponse
from suggestor.models.suggestion import SuggestionRequest, SuggestionResponse
from suggestor.pipeline.orchestrator import SuggestionOrchestrator
from suggestor.utils.errors import SuggestorError
from suggestor.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter()

_TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_orchestrator(request: Request) -> SuggestionOrchestrator:
    """Return the suggestion orchestrator from application state."""
    return request.app.state.orchestrator


OrchestratorDep = Annotated[SuggestionOrchestrator, Depends(_get_orchestrator)]


def bool_option(value: str | None, fallback: bool = False) -> bool:
    """Parse a boolean query option; unparseable values give ``fallback``."""
    if value is None:
        return fallback
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return fallback


async def _read_suggestion_request(request: Request) -> SuggestionRequest:
    body = await request.body()
    try:
        return SuggestionRequest.model_validate_json(body)
    except ValidationError as exc:
        _logger.warning("invalid_request", path=request.url.path, error=str(exc))
        raise HTTPException(status_code=400, detail="Invalid request") from exc


# ---------------------------------------------------------------------------
# Suggestion endpoints
# ---------------------------------------------------------------------------


@router.post("/api/suggest", response_model=SuggestionResponse)
async def suggest(
    request: Request,
    orchestrator: OrchestratorDep,
    claims: ClaimsDep,
) -> SuggestionResponse:
    """Suggest alternate searches (author only today) for a keyword query."""
    body = await _read_suggestion_request(request)
    verbose = bool_option(request.query_params.get("verbose"))
    return await orchestrator.suggest(body.query, verbose=verbose)


@router.post("/api/suggest/author", response_model=SuggestionResponse)
async def suggest_author(
    request: Request,
    orchestrator: OrchestratorDep,
    claims: ClaimsDep,
) -> SuggestionResponse:
    """Suggest author searches from the backend alone, without the AI step."""
    body = await _read_suggestion_request(request)
    verbose = bool_option(request.query_params.get("verbose"))
    return await orchestrator.author_suggestions(body.query, verbose=verbose)


# ---------------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------------


@router.get("/healthcheck")
async def healthcheck(orchestrator: OrchestratorDep) -> JSONResponse:
    """Ping the search backend and report its health."""
    try:
        await orchestrator.ping()
        solr = ComponentHealth(healthy=True)
    except SuggestorError as exc:
        _logger.error("healthcheck_failed", error=str(exc))
        solr = ComponentHealth(healthy=False, message=exc.message)

    return JSONResponse(
        status_code=200 if solr.healthy else 500,
        content={"solr": solr.model_dump(exclude_none=True)},
    )


@router.get("/version", response_model=VersionResponse)
async def version(request: Request) -> VersionResponse:
    """Report the build tag (from a ``buildtag.*`` file), python version and commit."""
    build = "missing"
    files = glob.glob("buildtag.*")
    if len(files) == 1:
        build = files[0].replace("buildtag.", "", 1)

    settings = getattr(request.app.state, "settings", None)
    return VersionResponse(
        build=build,
        python_version=(
            f"{platform.python_version()} {platform.system().lower()}/{platform.machine()}"
        ),
        git_commit=settings.git_commit if settings else "unknown",
    )


@router.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    """Answer browser favicon requests without a 404 in the logs."""
    return Response(status_code=204)
