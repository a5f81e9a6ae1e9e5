from __future__ import annotations

import math
from typing import Dict, Mapping

from callqa.core.criteria import DEFAULT_REGISTRY, CriteriaRegistry
from callqa.core.models import AnalysisResult, Points


EXCELLENT = "Excellent"
GOOD = "Good"
NEEDS_IMPROVEMENT = "Needs Improvement"


def total_score(scores: Mapping[str, Points]) -> Points:
    # fsum keeps the total independent of key order.
    total = math.fsum(scores.values())
    return int(total) if total.is_integer() else total


def max_score(registry: CriteriaRegistry = DEFAULT_REGISTRY) -> int:
    return registry.total_weight()


def score_percentage(scores: Mapping[str, Points], registry: CriteriaRegistry = DEFAULT_REGISTRY) -> int:
    # Half-up rounding, so 62.5 -> 63 as in the browser's Math.round.
    return int(math.floor(100 * total_score(scores) / max_score(registry) + 0.5))


def performance_level(percentage: float, thresholds: Dict[str, float]) -> str:
    if percentage >= thresholds["excellent"]:
        return EXCELLENT
    if percentage >= thresholds["good"]:
        return GOOD
    return NEEDS_IMPROVEMENT


def build_report(
    result: AnalysisResult, registry: CriteriaRegistry, thresholds: Dict[str, float]
) -> Dict[str, object]:
    percentage = score_percentage(result.scores, registry)
    report = result.to_payload()
    report.update(
        totalScore=total_score(result.scores),
        maxScore=max_score(registry),
        percentage=percentage,
        performanceLevel=performance_level(percentage, thresholds),
    )
    return report
