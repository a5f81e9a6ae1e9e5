"""Turns an untrusted scoring reply into a score map the rest of the app can trust.

The registry is iterated rather than the reply: unexpected keys are ignored and
missing keys score 0. PASS_FAIL items collapse to 0 or full weight around the
midpoint; SCORE items are clamped into ``[0, weight]``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, Optional

from callqa.core.criteria import DEFAULT_REGISTRY, CriteriaRegistry
from callqa.core.errors import MalformedResponse
from callqa.core.models import AnalysisResult, EvaluationParameter, ParameterType, Points, ScoreMap


logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK = "Analysis complete."
DEFAULT_OBSERVATION = "No specific observations."


def _extract_json(text: str) -> Optional[str]:
    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match:
        return match.group(0)
    return None


def parse_response(raw: str) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        recovered = _extract_json(raw) if isinstance(raw, str) else None
        if not recovered:
            raise MalformedResponse(
                "Scoring response is not valid JSON", {"details": str(exc)}
            ) from exc
        try:
            payload = json.loads(recovered)
        except ValueError as inner:
            raise MalformedResponse(
                "Scoring response is not valid JSON", {"details": str(inner)}
            ) from inner

    if not isinstance(payload, dict):
        logger.warning("Scoring response is %s, not an object; ignoring it", type(payload).__name__)
        return {}
    return payload


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # JSON integers can exceed the float range.
            number = math.inf if value > 0 else -math.inf
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def _tidy(number: float) -> Points:
    return int(number) if number.is_integer() else number


def sanitize_score(param: EvaluationParameter, value: Any) -> Points:
    number = _as_number(value)
    if param.type is ParameterType.PASS_FAIL:
        return param.weight if number >= param.weight / 2 else 0
    return _tidy(min(max(0.0, number), float(param.weight)))


def sanitize_scores(payload: Dict[str, Any], registry: CriteriaRegistry = DEFAULT_REGISTRY) -> ScoreMap:
    raw_scores = payload.get("scores")
    if not isinstance(raw_scores, dict):
        raw_scores = {}
    return {p.key: sanitize_score(p, raw_scores.get(p.key)) for p in registry}


def _text_or_default(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def sanitize_response(
    raw: str,
    registry: CriteriaRegistry = DEFAULT_REGISTRY,
    strict: bool = False,
    transcript: Optional[str] = None,
) -> AnalysisResult:
    try:
        payload = parse_response(raw)
    except MalformedResponse as exc:
        if strict:
            raise
        logger.warning("%s (%s); defaulting every score to 0", exc.message, exc.details)
        payload = {}

    return AnalysisResult(
        scores=sanitize_scores(payload, registry),
        overall_feedback=_text_or_default(payload.get("overallFeedback"), DEFAULT_FEEDBACK),
        observation=_text_or_default(payload.get("observation"), DEFAULT_OBSERVATION),
        transcript=transcript,
    )
