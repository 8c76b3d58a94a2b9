"""Central orchestrator for the suggestion pipeline.

Sequences query parsing, candidate retrieval, confidence filtering, and
(when an AI provider is configured) AI refinement plus verification.
Each stage produces a new frozen :class:`SuggestionState` via
``model_copy``::

    START -> PARSED -> RETRIEVED -> FILTERED -> DONE                   (no AI)
    START -> PARSED -> RETRIEVED -> FILTERED -> PROPOSED -> VERIFIED -> DONE

FAILURE POLICY:
    Every suggestion failure is recovered here and becomes "contribute
    nothing further".  An ineligible query or a backend error leaves the
    baseline empty; an AI provider error falls back to the baseline.  The
    caller always gets a (possibly empty) list, never an exception.

    Once the AI has answered, its verified terms REPLACE the baseline; the
    baseline is only the AI's input context.
"""

from __future__ import annotations

import time

import structlog

from suggestor.config.schema import SuggestionConfig
from suggestor.interfaces.search_backend import ISearchBackend
from suggestor.models.pipeline import StageError, SuggestionStage, SuggestionState
from suggestor.models.suggestion import Suggestion, SuggestionResponse, SuggestionType
from suggestor.services.ai_refiner import AIRefiner
from suggestor.services.candidate_retriever import CandidateRetriever
from suggestor.services.confidence_filter import ConfidenceFilter
from suggestor.services.query_parser import QueryParser
from suggestor.services.verifier import Verifier
from suggestor.utils.errors import (
    BackendError,
    BackendUnavailableError,
    InvalidQueryError,
    ProviderError,
)
from suggestor.utils.logging import bind_term, get_logger, query_context


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class SuggestionOrchestrator:
    """Runs one suggestion request through the stage machine.

    All collaborators are injected at construction time.  ``refiner`` is
    ``None`` when no AI provider is configured, in which case the AI stages
    are skipped entirely.
    """

    def __init__(
        self,
        query_parser: QueryParser,
        retriever: CandidateRetriever,
        confidence_filter: ConfidenceFilter,
        verifier: Verifier,
        backend: ISearchBackend,
        config: SuggestionConfig,
        refiner: AIRefiner | None = None,
        prompt_override: str = "",
    ) -> None:
        self._query_parser = query_parser
        self._retriever = retriever
        self._confidence_filter = confidence_filter
        self._verifier = verifier
        self._backend = backend
        self._config = config
        self._refiner = refiner
        self._prompt_override = prompt_override
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def ai_enabled(self) -> bool:
        return self._refiner is not None

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    async def author_suggestions(self, query: str, verbose: bool = False) -> SuggestionResponse:
        """Backend-only author suggestions (no AI)."""
        with query_context(query):
            state = await self._run_baseline(SuggestionState(query=query), verbose)
            state = self._finish(state, state.baseline.to_suggestions())
        return SuggestionResponse(suggestions=state.suggestions)

    async def suggest(self, query: str, verbose: bool = False) -> SuggestionResponse:
        """Full pipeline: baseline, then AI refinement and verification when enabled."""
        state = await self.run(query, verbose)
        return SuggestionResponse(suggestions=state.suggestions)

    async def run(self, query: str, verbose: bool = False) -> SuggestionState:
        """Run the full pipeline and return the final state (errors included)."""
        with query_context(query):
            return await self._run_pipeline(query, verbose)

    async def _run_pipeline(self, query: str, verbose: bool) -> SuggestionState:
        state = await self._run_baseline(SuggestionState(query=query), verbose)
        self._logger.info(
            "baseline_ready",
            query=query,
            term=state.term,
            baseline=state.baseline.phrases,
        )

        if self._refiner is None:
            self._logger.debug("ai_step_skipped", reason="no AI provider configured")
            return self._finish(state, state.baseline.to_suggestions())

        state = await self._run_refinement(state)
        if state.proposal is None:
            return self._finish(state, state.baseline.to_suggestions())

        state = await self._run_verification(state)
        accepted = [
            Suggestion(type=SuggestionType.AUTHOR, value=term)
            for term in state.proposal.suggestions
            if state.verification.get(term, False)
        ]
        return self._finish(state, accepted)

    async def ping(self) -> None:
        """Delegate to the backend health check; errors propagate."""
        await self._backend.ping()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _run_baseline(self, state: SuggestionState, verbose: bool) -> SuggestionState:
        start = time.perf_counter()

        # --- Parse ---
        try:
            parsed = self._query_parser.parse(state.query)
        except InvalidQueryError as exc:
            return self._record_error(state, SuggestionStage.START, exc, start)
        state = state.model_copy(update={"stage": SuggestionStage.PARSED, "parsed": parsed})
        bind_term(parsed.term)

        # --- Retrieve ---
        try:
            candidates = await self._retriever.retrieve(parsed.term)
        except (BackendUnavailableError, BackendError) as exc:
            return self._record_error(state, SuggestionStage.PARSED, exc, start)
        state = state.model_copy(
            update={"stage": SuggestionStage.RETRIEVED, "candidates": candidates}
        )

        # --- Filter ---
        baseline = self._confidence_filter.filter(candidates, self._config.limit, verbose=verbose)
        self._logger.debug(
            "baseline_filtered",
            term=parsed.term,
            candidates=len(candidates),
            kept=len(baseline.candidates),
            cutoff=baseline.statistics.cutoff if baseline.statistics else None,
            elapsed_ms=_elapsed_ms(start),
        )
        return state.model_copy(update={"stage": SuggestionStage.FILTERED, "baseline": baseline})

    async def _run_refinement(self, state: SuggestionState) -> SuggestionState:
        start = time.perf_counter()
        if state.stage is not SuggestionStage.FILTERED:
            self._logger.info("ai_refine_raw_query", query=state.query, stage=state.stage.value)

        try:
            proposal = await self._refiner.refine(
                state.term,
                state.query,
                state.baseline,
                prompt_override=self._prompt_override or None,
            )
        except ProviderError as exc:
            errored = self._record_error(state, SuggestionStage.FILTERED, exc, start)
            self._logger.info("ai_fallback_to_baseline", baseline=state.baseline.phrases)
            return errored

        if proposal.did_you_mean:
            self._logger.info(
                "ai_did_you_mean",
                query=state.query,
                did_you_mean=proposal.did_you_mean,
            )
        return state.model_copy(update={"stage": SuggestionStage.PROPOSED, "proposal": proposal})

    async def _run_verification(self, state: SuggestionState) -> SuggestionState:
        start = time.perf_counter()
        verification = await self._verifier.verify(
            state.proposal.suggestions,
            self._retriever.count,
        )
        self._logger.info(
            "ai_terms_verified",
            proposed=len(state.proposal.suggestions),
            valid=sum(verification.values()),
            elapsed_ms=_elapsed_ms(start),
        )
        return state.model_copy(
            update={"stage": SuggestionStage.VERIFIED, "verification": verification}
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _finish(self, state: SuggestionState, suggestions: list[Suggestion]) -> SuggestionState:
        self._logger.info(
            "suggestions_complete",
            query=state.query,
            overall=len(suggestions),
            errors=len(state.errors),
        )
        return state.model_copy(update={"stage": SuggestionStage.DONE, "suggestions": suggestions})

    def _record_error(
        self,
        state: SuggestionState,
        stage: SuggestionStage,
        exc: Exception,
        start: float,
    ) -> SuggestionState:
        elapsed = _elapsed_ms(start)
        self._logger.warning(
            "suggestion_stage_failed",
            stage=stage.value,
            query=state.query,
            term=state.term,
            error_type=type(exc).__name__,
            error=str(exc),
            elapsed_ms=elapsed,
        )
        error = StageError(
            stage=stage,
            error_type=type(exc).__name__,
            message=str(exc),
            elapsed_ms=elapsed,
        )
        return state.model_copy(update={"errors": [*state.errors, error]})
