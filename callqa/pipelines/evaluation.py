from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional

from callqa.core.config import AppConfig, is_allowed_audio, resolve_api_key
from callqa.core.errors import (
    CallQAError,
    ConfigurationError,
    ScoringError,
    TranscriptionError,
    ValidationError,
)
from callqa.core.models import AnalysisResult, AudioUpload, TranscriptionResult
from callqa.services.prompt_builder import build_prompt
from callqa.services.sanitizer import sanitize_response


logger = logging.getLogger(__name__)

Transcriber = Callable[[AudioUpload], TranscriptionResult]
Scorer = Callable[[str], str]


class PipelineState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    TRANSCRIBING = "transcribing"
    SCORING = "scoring"
    COMPLETE = "complete"
    FAILED = "failed"


_TRANSITIONS = {
    PipelineState.IDLE: {PipelineState.UPLOADING, PipelineState.FAILED},
    PipelineState.UPLOADING: {PipelineState.TRANSCRIBING, PipelineState.FAILED},
    PipelineState.TRANSCRIBING: {PipelineState.SCORING, PipelineState.FAILED},
    PipelineState.SCORING: {PipelineState.COMPLETE, PipelineState.FAILED},
    PipelineState.COMPLETE: set(),
    PipelineState.FAILED: set(),
}


class PipelineRun:
    """State of a single upload as it moves through the pipeline."""

    def __init__(self, filename: str = "") -> None:
        self.filename = filename
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]
        self.error: Optional[CallQAError] = None

    @property
    def finished(self) -> bool:
        return not _TRANSITIONS[self.state]

    def advance(self, new_state: PipelineState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {new_state.value}")
        logger.info("%s: %s -> %s", self.filename or "<no file>", self.state.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)

    def fail(self, error: CallQAError) -> CallQAError:
        error.context.setdefault("stage", self.state.value)
        self.error = error
        self.advance(PipelineState.FAILED)
        return error


class EvaluationPipeline:
    def __init__(
        self,
        cfg: AppConfig,
        transcriber: Transcriber,
        scorer: Scorer,
        credential_check: Optional[Callable[[], Optional[str]]] = None,
    ) -> None:
        self.cfg = cfg
        self.transcriber = transcriber
        self.scorer = scorer
        self.credential_check = credential_check or (lambda: resolve_api_key(cfg))

    def evaluate(
        self, upload: Optional[AudioUpload], run: Optional[PipelineRun] = None
    ) -> AnalysisResult:
        run = run or PipelineRun(upload.filename if upload else "")

        self._validate(run, upload)
        run.advance(PipelineState.UPLOADING)
        if not self.credential_check():
            raise run.fail(
                ConfigurationError(
                    f"{self.cfg.api_key_env} not configured. Please add it to your environment"
                )
            )

        run.advance(PipelineState.TRANSCRIBING)
        try:
            transcription = self.transcriber(upload)
        except Exception as exc:
            logger.exception("Transcription failed for %s", upload.filename)
            raise run.fail(
                TranscriptionError(f"Transcription failed: {exc}", {"details": str(exc)})
            ) from exc

        transcript = transcription.transcript
        if not transcript.strip():
            logger.warning("Empty transcript for %s; scoring it anyway", upload.filename)
        logger.info("Transcription complete (%d chars). Starting analysis...", len(transcript))

        run.advance(PipelineState.SCORING)
        prompt = build_prompt(
            transcript,
            self.cfg.registry,
            int(self.cfg.scoring.get("max_transcript_chars") or 0),
        )
        try:
            raw = self.scorer(prompt)
            result = sanitize_response(
                raw,
                self.cfg.registry,
                strict=bool(self.cfg.scoring.get("strict_json", False)),
                transcript=transcript,
            )
        except Exception as exc:
            logger.exception("Analysis failed for %s", upload.filename)
            raise run.fail(
                ScoringError(f"Analysis failed: {exc}", {"details": str(exc)})
            ) from exc

        run.advance(PipelineState.COMPLETE)
        return result

    def _validate(self, run: PipelineRun, upload: Optional[AudioUpload]) -> None:
        if upload is None or not upload.data:
            raise run.fail(ValidationError("No audio file provided"))
        if not is_allowed_audio(upload.filename or "", upload.content_type or "", self.cfg):
            raise run.fail(ValidationError("Invalid file type. Please upload .mp3 or .wav file"))
