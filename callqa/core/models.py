from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


Points = Union[int, float]
ScoreMap = Dict[str, Points]


class ParameterType(str, Enum):
    PASS_FAIL = "PASS_FAIL"
    SCORE = "SCORE"


@dataclass(frozen=True)
class EvaluationParameter:
    name: str
    key: str
    type: ParameterType
    weight: int
    description: str


@dataclass(frozen=True)
class AudioUpload:
    filename: str
    content_type: str
    data: bytes = field(repr=False)


@dataclass
class TranscriptionResult:
    file_name: str
    transcript: str


@dataclass(frozen=True)
class AnalysisResult:
    scores: ScoreMap
    overall_feedback: str
    observation: str
    transcript: Optional[str] = None

    def to_payload(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "scores": dict(self.scores),
            "overallFeedback": self.overall_feedback,
            "observation": self.observation,
        }
        if self.transcript is not None:
            payload["transcript"] = self.transcript
        return payload
