"""Shared pytest fixtures for the author suggestor test suite."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from suggestor.config.schema import (
    AISection,
    ServiceConfig,
    SolrParamsConfig,
    SolrSection,
    SuggestionConfig,
)
from suggestor.interfaces.ai_provider import IAIProvider
from suggestor.interfaces.search_backend import ISearchBackend
from suggestor.models.search import Candidate, SolrResponse
from suggestor.models.suggestion import AIProposal

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def author_config() -> SuggestionConfig:
    """The ``suggestions.author`` section used by most service tests."""
    return SuggestionConfig(
        limit=5,
        rows=100,
        confidence_multiplier=2.0,
        params=SolrParamsConfig(
            deftype="edismax",
            fl=["phrase", "type", "count", "score"],
            fq=["type:author"],
            qf="phrase^10 phrase_text",
            sort="score desc",
        ),
    )


@pytest.fixture
def solr_config() -> SolrSection:
    return SolrSection(host="http://solr.test:8080/solr", core="suggestions")


@pytest.fixture
def service_config(solr_config: SolrSection, author_config: SuggestionConfig) -> ServiceConfig:
    return ServiceConfig(
        solr=solr_config,
        suggestions={"author": author_config},
        ai=AISection(),
    )


# ---------------------------------------------------------------------------
# Candidates & Solr payloads
# ---------------------------------------------------------------------------


def make_candidates(scores: list[float], prefix: str = "Author") -> list[Candidate]:
    """Build candidates named ``<prefix> 0``, ``<prefix> 1`` ... in the given order."""
    return [Candidate(phrase=f"{prefix} {i}", score=score) for i, score in enumerate(scores)]


def solr_select_payload(
    docs: list[tuple[str, float]],
    num_found: int | None = None,
    status: int = 0,
) -> dict[str, Any]:
    """A Solr select JSON body with the given (phrase, score) documents."""
    return {
        "responseHeader": {"status": status, "QTime": 3},
        "response": {
            "numFound": len(docs) if num_found is None else num_found,
            "start": 0,
            "maxScore": max((s for _, s in docs), default=0.0),
            "docs": [
                {"phrase": phrase, "type": "author", "count": 10, "score": score}
                for phrase, score in docs
            ],
        },
    }


def solr_response(docs: list[tuple[str, float]], num_found: int | None = None) -> SolrResponse:
    return SolrResponse.model_validate(solr_select_payload(docs, num_found))


@pytest.fixture
def outlier_candidates() -> list[Candidate]:
    """One clear outlier above a flat tail: only the first clears mean + 2*stddev."""
    return [
        Candidate(phrase="Twain, Mark", score=100.0),
        Candidate(phrase="Clemens, Samuel", score=10.0),
        Candidate(phrase="Howells, William Dean", score=10.0),
        Candidate(phrase="Paine, Albert Bigelow", score=10.0),
        Candidate(phrase="Kaplan, Justin", score=10.0),
    ]


# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_backend() -> MagicMock:
    """A mock ISearchBackend whose search returns an empty result by default."""
    backend = MagicMock(spec=ISearchBackend)
    backend.search = AsyncMock(return_value=solr_response([]))
    backend.ping = AsyncMock(return_value=None)
    backend.get_provider_name.return_value = "solr"
    backend.is_available.return_value = True
    return backend


@pytest.fixture
def mock_ai_provider() -> MagicMock:
    """A mock IAIProvider returning an empty proposal by default."""
    provider = MagicMock(spec=IAIProvider)
    provider.get_suggestions = AsyncMock(return_value=AIProposal())
    provider.get_provider_name.return_value = "mock-ai"
    provider.get_model.return_value = "mock-model"
    provider.is_available.return_value = True
    return provider


# ---------------------------------------------------------------------------
# httpx helpers
# ---------------------------------------------------------------------------


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )
