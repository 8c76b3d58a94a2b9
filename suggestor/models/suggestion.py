"""Suggestion models: request, response, AI proposal, and filter output.

All models use frozen config -- every one of them is created per request
and discarded once the response is assembled.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from suggestor.models.search import Candidate


class SuggestionType(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Kinds of alternate search a suggestion can stand for.

    Only author searches are produced today.
    """

    AUTHOR = "author"


class Suggestion(BaseModel):
    """The externally visible unit: a (type, value) pair."""

    model_config = ConfigDict(frozen=True)

    type: SuggestionType = SuggestionType.AUTHOR
    value: str


class SuggestionRequest(BaseModel):
    """Inbound request body; ``query`` is the raw text the caller searched."""

    model_config = ConfigDict(frozen=True)

    query: str


class SuggestionResponse(BaseModel):
    """Ordered list of suggestions; empty on ineligible or failed queries."""

    model_config = ConfigDict(frozen=True)

    suggestions: list[Suggestion] = Field(default_factory=list)

    @property
    def values(self) -> list[str]:
        return [s.value for s in self.suggestions]


# ---------------------------------------------------------------------------
# ConfidenceSet -- output of the statistical filter
# ---------------------------------------------------------------------------
class ScoreStatistics(BaseModel):
    """Summary statistics over one retrieval's scores.

    Only used for diagnostics (the ``verbose`` flag) and tests; the cutoff
    is the one figure that drives filtering.
    """

    model_config = ConfigDict(frozen=True)

    count: int
    max: float
    min: float
    mean: float
    median: float
    variance: float
    stddev: float
    cutoff: float


class ConfidenceSet(BaseModel):
    """Candidates whose score cleared the cutoff, capped at the configured limit.

    Order is preserved from the source sequence.  ``statistics`` is ``None``
    when there was nothing to filter.
    """

    model_config = ConfigDict(frozen=True)

    candidates: list[Candidate] = Field(default_factory=list)
    statistics: ScoreStatistics | None = None

    @property
    def phrases(self) -> list[str]:
        return [c.phrase for c in self.candidates]

    def to_suggestions(self) -> list[Suggestion]:
        return [Suggestion(type=SuggestionType.AUTHOR, value=c.phrase) for c in self.candidates]


# ---------------------------------------------------------------------------
# AIProposal -- the AI provider's structured reply
# ---------------------------------------------------------------------------
class AIProposal(BaseModel):
    """Structured reply from an AI provider, unvalidated until verified.

    The wire format uses ``didYouMean``; ``suggestions`` is the ordered list
    of proposed author terms.  Blank entries are dropped and whitespace is
    trimmed on the way in.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    did_you_mean: str = Field(default="", alias="didYouMean")
    suggestions: list[str] = Field(default_factory=list)

    @field_validator("did_you_mean", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("suggestions", mode="before")
    @classmethod
    def _clean_terms(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value


class VerificationResult(BaseModel):
    """Whether one AI-proposed term produced backend hits."""

    model_config = ConfigDict(frozen=True)

    term: str
    valid: bool
