"""Shared test fixtures and fakes for the external collaborators."""

from __future__ import annotations

import json
from typing import List

import pytest

from callqa.core.config import AppConfig
from callqa.core.models import AudioUpload, TranscriptionResult
from callqa.pipelines.evaluation import EvaluationPipeline


SAMPLE_TRANSCRIPT = (
    "Agent: Good morning, this is Anna from Northside Collections. This call is recorded. "
    "Can you confirm your date of birth? Customer: Sure, it's March third. "
    "Agent: Thank you. Your balance of 420 dollars is 60 days past due. "
    "Customer: I lost my job last month. Agent: I'm sorry to hear that. "
    "We can split it into three payments. Customer: OK, I can pay the first one Friday. "
    "Agent: Great, I'll note that. Have a good day."
)


class FakeTranscriber:
    def __init__(self, transcript: str = SAMPLE_TRANSCRIPT, error: Exception | None = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls: List[AudioUpload] = []

    def __call__(self, upload: AudioUpload) -> TranscriptionResult:
        self.calls.append(upload)
        if self.error is not None:
            raise self.error
        return TranscriptionResult(file_name=upload.filename, transcript=self.transcript)


class FakeScorer:
    def __init__(self, reply: str = "{}", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def good_reply() -> str:
    return json.dumps(
        {
            "scores": {
                "greeting": 5,
                "collectionUrgency": 9,
                "customerVerification": 10,
                "activeListening": 7,
                "empathy": 8,
                "paymentOptions": 9,
                "objectionHandling": 10,
                "complianceDisclosure": 15,
                "callControl": 7,
                "commitmentSecured": 10,
                "professionalClosing": 4,
            },
            "overallFeedback": "Strong, compliant call with a secured commitment.",
            "observation": "Verified identity early and offered a three-part plan.",
        }
    )


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig()


@pytest.fixture
def mp3_upload() -> AudioUpload:
    return AudioUpload(filename="call.mp3", content_type="audio/mpeg", data=b"ID3\x03fake-mp3")


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def scorer(good_reply: str) -> FakeScorer:
    return FakeScorer(good_reply)


@pytest.fixture
def pipeline(cfg: AppConfig, transcriber: FakeTranscriber, scorer: FakeScorer) -> EvaluationPipeline:
    return EvaluationPipeline(cfg, transcriber, scorer, credential_check=lambda: "test-key")
