"""Author suggestor FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Configuration is loaded once at startup (``config/config.yaml`` plus
``SUGGESTOR_*`` environment variables) into an immutable ServiceConfig
that is passed explicitly into every component.

Also exposes :func:`build_components` for the CLI, which runs the same
pipeline outside the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from suggestor.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_compression,
    configure_cors,
)
from suggestor.api.routes import router as api_router
from suggestor.config.loader import load_config
from suggestor.config.schema import AISection, ServiceConfig
from suggestor.config.settings import Settings
from suggestor.interfaces.ai_provider import IAIProvider
from suggestor.pipeline.orchestrator import SuggestionOrchestrator
from suggestor.providers.ai.anthropic_provider import AnthropicAIProvider
from suggestor.providers.ai.bedrock_provider import BedrockAIProvider
from suggestor.providers.ai.openai_provider import OpenAIAIProvider
from suggestor.providers.search.solr_provider import SolrSearchProvider
from suggestor.services.ai_refiner import AIRefiner
from suggestor.services.candidate_retriever import CandidateRetriever
from suggestor.services.confidence_filter import ConfidenceFilter
from suggestor.services.query_parser import QueryParser
from suggestor.services.verifier import Verifier
from suggestor.utils.logging import configure_logging, get_logger

APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# AI provider selection
# ---------------------------------------------------------------------------


def _build_ai_provider(ai_config: AISection, app_settings: Settings) -> IAIProvider | None:
    """Build the provider named by ``ai.provider``, or ``None``.

    ``None`` (AI step skipped) when the provider is unset, unknown, or
    lacks credentials.
    """
    name = ai_config.provider.strip().lower()
    if not name:
        _logger.info("ai_provider_disabled")
        return None

    provider: IAIProvider
    if name == "bedrock":
        provider = BedrockAIProvider(config=ai_config)
    elif name == "openai":
        provider = OpenAIAIProvider(config=ai_config, settings=app_settings)
    elif name == "anthropic":
        provider = AnthropicAIProvider(config=ai_config, settings=app_settings)
    else:
        _logger.error("ai_provider_unknown", provider=name)
        return None

    if not provider.is_available():
        _logger.error(
            "ai_provider_unavailable",
            provider=provider.get_provider_name(),
            model=provider.get_model(),
        )
        return None

    _logger.info(
        "ai_provider_ready",
        provider=provider.get_provider_name(),
        model=provider.get_model(),
    )
    return provider


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    config: ServiceConfig | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    config = config or load_config(settings=app_settings)
    author = config.suggestions.author

    # -- Backend --
    backend = SolrSearchProvider(config=config.solr)

    # -- AI (optional) --
    ai_provider = _build_ai_provider(config.ai, app_settings)
    refiner = AIRefiner(ai_provider) if ai_provider is not None else None

    # -- Services --
    retriever = CandidateRetriever(backend=backend, config=author)
    orchestrator = SuggestionOrchestrator(
        query_parser=QueryParser(),
        retriever=retriever,
        confidence_filter=ConfidenceFilter(multiplier=author.confidence_multiplier),
        verifier=Verifier(max_concurrency=config.ai.max_verifications),
        backend=backend,
        config=author,
        refiner=refiner,
        prompt_override=config.ai.prompt,
    )

    return {
        "settings": app_settings,
        "config": config,
        "backend": backend,
        "ai_provider": ai_provider,
        "orchestrator": orchestrator,
    }


async def close_components(components: dict[str, Any]) -> None:
    """Close the HTTP clients owned by the components."""
    await components["backend"].aclose()
    ai_provider = components.get("ai_provider")
    if isinstance(ai_provider, BedrockAIProvider):
        await ai_provider.aclose()


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = build_components(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    ai_provider = components["ai_provider"]
    _logger.info(
        "app_startup",
        version=APP_VERSION,
        environment=settings.app_env,
        solr=components["config"].solr.host,
        ai_provider=ai_provider.get_provider_name() if ai_provider else None,
    )

    yield

    await close_components(components)
    _logger.info("app_shutdown", message="HTTP clients closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Author Suggestor API",
        version=APP_VERSION,
        description=(
            "Turns a catalog keyword search into a short list of high-confidence "
            "author searches, optionally refined by a generative-AI provider."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_compression(application)
    configure_cors(application)

    # -- Routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "suggestor.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
