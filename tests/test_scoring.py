"""Unit tests for score aggregation."""

import pytest

from callqa.core.criteria import DEFAULT_REGISTRY, registry_from_config
from callqa.core.models import AnalysisResult
from callqa.services.scoring import (
    EXCELLENT,
    GOOD,
    NEEDS_IMPROVEMENT,
    build_report,
    max_score,
    performance_level,
    score_percentage,
    total_score,
)


THRESHOLDS = {"excellent": 85, "good": 70}


class TestTotals:
    def test_total_score_sums_values(self):
        assert total_score({"a": 3, "b": 4.5, "c": 0}) == 7.5

    def test_total_score_of_empty_map(self):
        assert total_score({}) == 0

    def test_integral_total_is_int(self):
        assert isinstance(total_score({"a": 2.5, "b": 2.5}), int)

    def test_max_score_is_sum_of_weights(self):
        assert max_score() == 103
        assert max_score(DEFAULT_REGISTRY) == 5 + 12 + 10 + 8 + 8 + 10 + 12 + 15 + 8 + 10 + 5

    def test_order_does_not_matter(self):
        scores = {"a": 0.1, "b": 0.2, "c": 0.3, "d": 7}
        reversed_scores = dict(reversed(list(scores.items())))
        assert total_score(scores) == total_score(reversed_scores)
        assert score_percentage(scores) == score_percentage(reversed_scores)


class TestPercentage:
    def test_full_marks(self):
        scores = {p.key: p.weight for p in DEFAULT_REGISTRY}
        assert score_percentage(scores) == 100

    def test_zero(self):
        assert score_percentage({p.key: 0 for p in DEFAULT_REGISTRY}) == 0

    def test_rounds_half_up(self):
        registry = registry_from_config([{"name": "A", "key": "a", "weight": 8}])
        # 5/8 = 62.5%
        assert score_percentage({"a": 5}, registry) == 63

    def test_monotonic_in_total(self):
        previous = -1
        for total in range(0, 104):
            pct = score_percentage({"x": total})
            assert pct >= previous
            previous = pct


class TestPerformanceLevel:
    @pytest.mark.parametrize(
        "pct, expected",
        [(100, EXCELLENT), (85, EXCELLENT), (84, GOOD), (70, GOOD), (69, NEEDS_IMPROVEMENT), (0, NEEDS_IMPROVEMENT)],
    )
    def test_levels(self, pct, expected):
        assert performance_level(pct, THRESHOLDS) == expected


def test_build_report_adds_summary_fields():
    scores = {p.key: p.weight for p in DEFAULT_REGISTRY}
    result = AnalysisResult(scores=scores, overall_feedback="fine", observation="ok", transcript="hi")
    report = build_report(result, DEFAULT_REGISTRY, THRESHOLDS)
    assert report["totalScore"] == 103
    assert report["maxScore"] == 103
    assert report["percentage"] == 100
    assert report["performanceLevel"] == EXCELLENT
    assert report["overallFeedback"] == "fine"
    assert report["transcript"] == "hi"
