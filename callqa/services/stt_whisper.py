from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import OpenAI

from callqa.core.models import AudioUpload, TranscriptionResult


logger = logging.getLogger(__name__)


def transcribe(client: OpenAI, upload: AudioUpload, cfg_transcription: Dict[str, Any]) -> TranscriptionResult:
    kwargs: Dict[str, Any] = {}
    language: Optional[str] = cfg_transcription.get("language") or None
    if language:
        kwargs["language"] = language
    if cfg_transcription.get("prompt"):
        kwargs["prompt"] = cfg_transcription["prompt"]

    logger.debug("Transcribing %s (%d bytes)", upload.filename, len(upload.data))
    transcription = client.audio.transcriptions.create(
        model=cfg_transcription["model"],
        file=(upload.filename, upload.data, upload.content_type or "application/octet-stream"),
        response_format="json",
        temperature=float(cfg_transcription.get("temperature", 0.0)),
        **kwargs,
    )

    text = transcription.text if hasattr(transcription, "text") else str(transcription)
    return TranscriptionResult(file_name=upload.filename, transcript=(text or "").strip())
