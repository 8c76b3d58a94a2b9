"""Pipeline state models for a single suggestion request.

Defines Pydantic v2 models for the request's stages, recovered errors, and
the state snapshot.  All models are frozen -- stage transitions produce new
SuggestionState instances via model_copy(update={...}).

Architecture note:
    SuggestionState is the request-scoped record of what the orchestrator
    (suggestor/pipeline/orchestrator.py) has produced so far.  Nothing in it
    outlives the request, and no instance is shared between requests.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from suggestor.models.query import ParsedQuery
from suggestor.models.search import Candidate
from suggestor.models.suggestion import AIProposal, ConfidenceSet, Suggestion


class SuggestionStage(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Stages of the suggestion state machine.

        START -> PARSED -> RETRIEVED -> FILTERED -> DONE                  (no AI)
        START -> PARSED -> RETRIEVED -> FILTERED -> PROPOSED -> VERIFIED -> DONE
    """

    START = "START"
    PARSED = "PARSED"
    RETRIEVED = "RETRIEVED"
    FILTERED = "FILTERED"
    PROPOSED = "PROPOSED"
    VERIFIED = "VERIFIED"
    DONE = "DONE"


class StageError(BaseModel):
    """An error recovered at the orchestrator boundary.

    Recorded instead of raised: suggestion failures never become request
    failures.
    """

    model_config = ConfigDict(frozen=True)

    stage: SuggestionStage
    error_type: str
    message: str
    elapsed_ms: int = 0


class SuggestionState(BaseModel):
    """Snapshot of one suggestion request as it moves through the stages."""

    model_config = ConfigDict(frozen=True)

    query: str
    stage: SuggestionStage = SuggestionStage.START
    parsed: ParsedQuery | None = None
    candidates: list[Candidate] = Field(default_factory=list)
    baseline: ConfidenceSet = Field(default_factory=ConfidenceSet)
    proposal: AIProposal | None = None
    verification: dict[str, bool] = Field(default_factory=dict)
    suggestions: list[Suggestion] = Field(default_factory=list)
    errors: list[StageError] = Field(default_factory=list)

    @property
    def term(self) -> str:
        return self.parsed.term if self.parsed else ""
