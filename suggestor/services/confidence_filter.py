"""Statistical confidence filter over one retrieval's scores.

Keeps only the outliers at the top of a score-descending candidate list:

    cutoff = mean + k * stddev        (population stddev over ALL scores)

Candidates are walked in retrieval order; the walk stops at the first
candidate scoring below the cutoff or once ``max_count`` have been kept.
Since the backend returns candidates by descending score, this equals
filtering the full list and truncating.  Ties at the boundary are decided
by ``>=`` alone.
"""

from __future__ import annotations

import numpy as np

from suggestor.models.search import Candidate
from suggestor.models.suggestion import ConfidenceSet, ScoreStatistics
from suggestor.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MULTIPLIER = 2.0


class ConfidenceFilter:
    """Partitions confident candidates from the rest.

    Parameters
    ----------
    multiplier:
        ``k`` in ``mean + k * stddev``.  A policy constant from
        configuration, never caller input.
    """

    def __init__(self, multiplier: float = DEFAULT_MULTIPLIER) -> None:
        self._multiplier = multiplier

    @property
    def multiplier(self) -> float:
        return self._multiplier

    def statistics(self, candidates: list[Candidate]) -> ScoreStatistics | None:
        """Compute the score statistics and cutoff, or ``None`` for no candidates."""
        if not candidates:
            return None

        scores = np.array([c.score for c in candidates], dtype=float)
        mean = float(np.mean(scores))
        # Identical scores: avoid rounding noise pushing the cutoff above them.
        if np.ptp(scores) == 0:
            variance = 0.0
            stddev = 0.0
            cutoff = float(scores[0])
        else:
            variance = float(np.var(scores, ddof=0))
            stddev = float(np.std(scores, ddof=0))
            cutoff = mean + self._multiplier * stddev

        return ScoreStatistics(
            count=len(scores),
            max=float(np.max(scores)),
            min=float(np.min(scores)),
            mean=mean,
            median=float(np.median(scores)),
            variance=variance,
            stddev=stddev,
            cutoff=cutoff,
        )

    def filter(
        self,
        candidates: list[Candidate],
        max_count: int,
        verbose: bool = False,
    ) -> ConfidenceSet:
        """Return the candidates that clear the cutoff, at most ``max_count``."""
        stats = self.statistics(candidates)
        if stats is None:
            return ConfidenceSet()

        if verbose:
            for rank, candidate in enumerate(candidates):
                logger.info(
                    "candidate_score",
                    rank=rank,
                    score=round(candidate.score, 2),
                    phrase=candidate.phrase,
                )

        kept: list[Candidate] = []
        for candidate in candidates:
            if candidate.score < stats.cutoff or len(kept) >= max_count:
                break
            kept.append(candidate)

        if verbose:
            logger.info(
                "confidence_statistics",
                len=stats.count,
                max=stats.max,
                min=stats.min,
                mean=stats.mean,
                median=stats.median,
                variance=stats.variance,
                stddev=stats.stddev,
                cutoff=stats.cutoff,
                authors=len(kept),
            )

        return ConfidenceSet(candidates=kept, statistics=stats)
