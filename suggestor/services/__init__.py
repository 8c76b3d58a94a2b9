"""Suggestion pipeline services, one per stage.

- query_parser        -- single-keyword eligibility check (pure)
- candidate_retriever -- scored author phrases from the backend
- confidence_filter   -- mean + k*stddev outlier cutoff
- ai_refiner          -- prompt construction and AI reply parsing
- verifier            -- concurrent, fail-open hit-count checks
"""

from suggestor.services.ai_refiner import (
    AIRefiner,
    build_suggestion_prompt,
    format_results_block,
    parse_ai_reply,
)
from suggestor.services.candidate_retriever import CandidateRetriever
from suggestor.services.confidence_filter import ConfidenceFilter
from suggestor.services.query_parser import QueryParser
from suggestor.services.verifier import Verifier

__all__ = [
    "AIRefiner",
    "CandidateRetriever",
    "ConfidenceFilter",
    "QueryParser",
    "Verifier",
    "build_suggestion_prompt",
    "format_results_block",
    "parse_ai_reply",
]
