from __future__ import annotations

import logging
from typing import Any, Dict

from openai import OpenAI

from callqa.services.prompt_builder import SYSTEM_PROMPT


logger = logging.getLogger(__name__)


def score_prompt(client: OpenAI, prompt: str, cfg_scoring: Dict[str, Any]) -> str:
    kwargs: Dict[str, Any] = {}
    # LM Studio rejects the json_object response format.
    if cfg_scoring.get("json_mode", True):
        kwargs["response_format"] = {"type": "json_object"}

    response = client.chat.completions.create(
        model=cfg_scoring["model"],
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=float(cfg_scoring.get("temperature", 0.3)),
        max_tokens=int(cfg_scoring.get("max_output_tokens", 2000)),
        **kwargs,
    )

    if not response.choices:
        logger.warning("Scoring service returned no choices")
        return "{}"
    return response.choices[0].message.content or "{}"
