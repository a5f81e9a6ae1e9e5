from __future__ import annotations

import json

from callqa.core.criteria import DEFAULT_REGISTRY, CriteriaRegistry
from callqa.core.models import EvaluationParameter, ParameterType


SYSTEM_PROMPT = "You are a professional call quality analyst. Respond only with valid JSON."

SCORING_RULES = """
IMPORTANT SCORING RULES:
1. For PASS/FAIL parameters: Score must be either 0 (failed) or the full weight value (passed)
2. For SCORE parameters: Score can be any number from 0 to the weight value
3. Be strict but fair in your evaluation
4. Base scores only on what you can verify from the transcript
""".strip()

_FEEDBACK_HINT = "<2-3 sentences summarizing the agent's overall performance>"
_OBSERVATION_HINT = (
    "<detailed observations about what the agent did well and areas for improvement, "
    "including specific examples from the call>"
)


def describe_parameter(param: EvaluationParameter) -> str:
    if param.type is ParameterType.PASS_FAIL:
        score_type = f"PASS/FAIL (0 or {param.weight} points)"
    else:
        score_type = f"SCORE (0 to {param.weight} points)"
    return f"- {param.name} ({param.key}): {param.description} [{score_type}]"


def build_criteria_text(registry: CriteriaRegistry = DEFAULT_REGISTRY) -> str:
    return "\n".join(describe_parameter(p) for p in registry)


def build_response_format(registry: CriteriaRegistry = DEFAULT_REGISTRY) -> str:
    score_lines = ",\n".join(f'    "{key}": <number>' for key in registry.keys)
    return (
        "{\n"
        '  "scores": {\n'
        f"{score_lines}\n"
        "  },\n"
        f'  "overallFeedback": {json.dumps(_FEEDBACK_HINT)},\n'
        f'  "observation": {json.dumps(_OBSERVATION_HINT)}\n'
        "}"
    )


def build_prompt(
    transcript: str, registry: CriteriaRegistry = DEFAULT_REGISTRY, max_transcript_chars: int = 0
) -> str:
    if max_transcript_chars and len(transcript) > max_transcript_chars:
        transcript = transcript[:max_transcript_chars]

    return (
        "You are an expert call quality analyst for a debt collection agency. "
        "Analyze the following call transcript and evaluate the agent's performance.\n\n"
        f"CALL TRANSCRIPT:\n{transcript}\n\n"
        f"EVALUATION CRITERIA:\n{build_criteria_text(registry)}\n\n"
        f"{SCORING_RULES}\n\n"
        "Please provide your analysis in the following JSON format:\n"
        f"{build_response_format(registry)}\n\n"
        "Respond ONLY with valid JSON, no additional text."
    )
