from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from callqa.core.config import AppConfig, load_config
from callqa.core.errors import CallQAError
from callqa.core.logging_setup import setup_logging
from callqa.core.models import AudioUpload, TranscriptionResult
from callqa.pipelines.evaluation import EvaluationPipeline
from callqa.services.llm_client import client_for_provider
from callqa.services.llm_scoring import score_prompt
from callqa.services.scoring import build_report
from callqa.services.stt_whisper import transcribe


def build_pipeline(cfg: AppConfig) -> EvaluationPipeline:
    # Built on first use so a missing key is reported per request, not at startup.
    client = lru_cache(maxsize=1)(lambda: client_for_provider(cfg))

    def transcriber(upload: AudioUpload) -> TranscriptionResult:
        return transcribe(client(), upload, cfg.transcription)

    def scorer(prompt: str) -> str:
        return score_prompt(client(), prompt, cfg.scoring)

    return EvaluationPipeline(cfg, transcriber, scorer)


def _read_upload(path: Path) -> AudioUpload:
    content_type = mimetypes.guess_type(path.name)[0] or ""
    return AudioUpload(filename=path.name, content_type=content_type, data=path.read_bytes())


def run_evaluate(cfg: AppConfig, file_path: Optional[Path]) -> int:
    if file_path is None or not file_path.exists():
        print(f"Audio file not found: {file_path}", file=sys.stderr)
        return 2

    pipeline = build_pipeline(cfg)
    try:
        result = pipeline.evaluate(_read_upload(file_path))
    except CallQAError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    payload = build_report(result, cfg.registry, cfg.performance_levels)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def run_server(cfg: AppConfig) -> None:
    import uvicorn

    from callqa.app.web import create_app

    app = create_app(cfg, build_pipeline(cfg))
    uvicorn.run(app, host=str(cfg.server["host"]), port=int(cfg.server["port"]), log_config=None)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", choices=["serve", "evaluate"], default="serve")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"))
    parser.add_argument("--file", type=Path, default=None)
    args = parser.parse_args()

    cfg = load_config(args.config)
    setup_logging(cfg.logging)

    if args.mode == "evaluate":
        sys.exit(run_evaluate(cfg, args.file))
    run_server(cfg)


if __name__ == "__main__":
    main()
