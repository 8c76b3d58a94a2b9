"""Unit tests for the mean + k*stddev confidence filter."""

from __future__ import annotations

import pytest

from suggestor.models.search import Candidate
from suggestor.services.confidence_filter import ConfidenceFilter
from tests.conftest import make_candidates


class TestStatistics:
    def test_empty_has_no_statistics(self) -> None:
        assert ConfidenceFilter().statistics([]) is None

    def test_population_statistics(self) -> None:
        stats = ConfidenceFilter(multiplier=2.0).statistics(
            make_candidates([100.0, 10.0, 10.0, 10.0, 10.0])
        )
        assert stats is not None
        assert stats.count == 5
        assert stats.max == 100.0
        assert stats.min == 10.0
        assert stats.mean == pytest.approx(28.0)
        assert stats.median == pytest.approx(10.0)
        assert stats.variance == pytest.approx(1296.0)
        assert stats.stddev == pytest.approx(36.0)
        assert stats.cutoff == pytest.approx(100.0)

    def test_identical_scores_cutoff_equals_score(self) -> None:
        stats = ConfidenceFilter().statistics(make_candidates([0.3, 0.3, 0.3]))
        assert stats is not None
        assert stats.stddev == 0.0
        assert stats.cutoff == 0.3


class TestFilter:
    def test_no_candidates(self) -> None:
        result = ConfidenceFilter().filter([], max_count=5)
        assert result.candidates == []
        assert result.statistics is None

    def test_single_outlier_kept(self, outlier_candidates: list[Candidate]) -> None:
        result = ConfidenceFilter(multiplier=2.0).filter(outlier_candidates, max_count=5)
        assert result.phrases == ["Twain, Mark"]

    def test_boundary_ties_kept(self) -> None:
        candidates = make_candidates([50.0, 50.0] + [0.0] * 8)
        result = ConfidenceFilter(multiplier=2.0).filter(candidates, max_count=5)
        assert result.statistics is not None
        assert result.statistics.cutoff == pytest.approx(50.0)
        assert result.phrases == ["Author 0", "Author 1"]

    def test_all_equal_scores_capped_at_max_count(self) -> None:
        candidates = make_candidates([7.0] * 10)
        result = ConfidenceFilter().filter(candidates, max_count=5)
        assert result.phrases == [f"Author {i}" for i in range(5)]

    def test_single_candidate_always_kept(self) -> None:
        result = ConfidenceFilter().filter(make_candidates([1.5]), max_count=5)
        assert result.phrases == ["Author 0"]

    def test_zero_max_count_keeps_nothing(self, outlier_candidates: list[Candidate]) -> None:
        result = ConfidenceFilter().filter(outlier_candidates, max_count=0)
        assert result.candidates == []
        assert result.statistics is not None

    def test_walk_stops_at_first_score_below_cutoff(self) -> None:
        candidates = make_candidates([100.0, 10.0, 100.0] + [10.0] * 7)
        result = ConfidenceFilter(multiplier=2.0).filter(candidates, max_count=5)
        assert result.phrases == ["Author 0"]

    def test_zero_multiplier_uses_mean(self, outlier_candidates: list[Candidate]) -> None:
        result = ConfidenceFilter(multiplier=0.0).filter(outlier_candidates, max_count=5)
        assert result.phrases == ["Twain, Mark"]

    def test_order_preserved(self) -> None:
        candidates = make_candidates([9.0, 8.0, 8.5] + [0.0] * 20)
        result = ConfidenceFilter(multiplier=1.0).filter(candidates, max_count=5)
        assert result.phrases == ["Author 0", "Author 1", "Author 2"]

    def test_to_suggestions(self, outlier_candidates: list[Candidate]) -> None:
        result = ConfidenceFilter().filter(outlier_candidates, max_count=5)
        suggestions = result.to_suggestions()
        assert [s.model_dump(mode="json") for s in suggestions] == [
            {"type": "author", "value": "Twain, Mark"}
        ]

    def test_verbose_does_not_change_result(self, outlier_candidates: list[Candidate]) -> None:
        quiet = ConfidenceFilter().filter(outlier_candidates, max_count=5)
        loud = ConfidenceFilter().filter(outlier_candidates, max_count=5, verbose=True)
        assert quiet == loud
