"""Suggestion pipeline orchestration."""

from suggestor.pipeline.orchestrator import SuggestionOrchestrator

__all__ = ["SuggestionOrchestrator"]
