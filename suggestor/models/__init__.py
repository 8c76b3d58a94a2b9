"""Suggestor domain models -- re-exports all public model classes.

The models are organized across four submodules by concern:
    - query.py      -- ParsedQuery (field -> values breakdown of a raw query)
    - search.py     -- Solr wire models and the scored Candidate
    - suggestion.py -- request/response, ConfidenceSet, AIProposal
    - pipeline.py   -- per-request stage machine state
"""

from __future__ import annotations

from suggestor.models.pipeline import (
    StageError,
    SuggestionStage,
    SuggestionState,
)
from suggestor.models.query import ParsedQuery
from suggestor.models.search import (
    Candidate,
    SolrDocument,
    SolrError,
    SolrRequestParams,
    SolrResponse,
    SolrResponseDocuments,
    SolrResponseHeader,
)
from suggestor.models.suggestion import (
    AIProposal,
    ConfidenceSet,
    ScoreStatistics,
    Suggestion,
    SuggestionRequest,
    SuggestionResponse,
    SuggestionType,
    VerificationResult,
)

__all__ = [
    "AIProposal",
    "Candidate",
    "ConfidenceSet",
    "ParsedQuery",
    "ScoreStatistics",
    "SolrDocument",
    "SolrError",
    "SolrRequestParams",
    "SolrResponse",
    "SolrResponseDocuments",
    "SolrResponseHeader",
    "StageError",
    "Suggestion",
    "SuggestionRequest",
    "SuggestionResponse",
    "SuggestionStage",
    "SuggestionState",
    "SuggestionType",
    "VerificationResult",
]
