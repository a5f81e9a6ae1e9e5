"""HTTP surface for the call evaluation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field

from callqa.core.config import AppConfig
from callqa.core.errors import (
    CallQAError,
    ConfigurationError,
    ScoringError,
    TranscriptionError,
    ValidationError,
)
from callqa.core.models import AudioUpload
from callqa.pipelines.evaluation import EvaluationPipeline
from callqa.services.scoring import build_report, max_score


logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

_STATUS_BY_ERROR = {
    ValidationError: 400,
    ConfigurationError: 500,
    TranscriptionError: 502,
    ScoringError: 502,
}


class AnalysisResponse(BaseModel):
    scores: Dict[str, Union[int, float]]
    overallFeedback: str
    observation: str
    transcript: Optional[str] = None
    totalScore: Union[int, float]
    maxScore: int
    percentage: int
    performanceLevel: str


class CriterionItem(BaseModel):
    name: str
    key: str
    type: str
    weight: int = Field(gt=0)
    description: str


class CriteriaResponse(BaseModel):
    criteria: List[CriterionItem]
    maxScore: int


def _error_response(exc: CallQAError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    body: Dict[str, Any] = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(status_code=status, content=body)


def create_app(cfg: AppConfig, pipeline: EvaluationPipeline) -> FastAPI:
    app = FastAPI(title="callqa scoring service")
    app.state.cfg = cfg
    app.state.pipeline = pipeline

    @app.exception_handler(CallQAError)
    async def _handle_pipeline_error(request: Request, exc: CallQAError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.get("/")
    def index() -> FileResponse:
        return FileResponse(STATIC_DIR / "index.html", media_type="text/html")

    @app.get("/healthz")
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/criteria", response_model=CriteriaResponse)
    def criteria(request: Request) -> CriteriaResponse:
        registry = request.app.state.cfg.registry
        return CriteriaResponse(
            criteria=[
                CriterionItem(
                    name=p.name, key=p.key, type=p.type.value, weight=p.weight, description=p.description
                )
                for p in registry
            ],
            maxScore=max_score(registry),
        )

    @app.post("/api/analyze-call", response_model=AnalysisResponse)
    def analyze_call(request: Request, audio: Optional[UploadFile] = File(default=None)) -> AnalysisResponse:
        upload = None
        if audio is not None:
            upload = AudioUpload(
                filename=audio.filename or "",
                content_type=audio.content_type or "",
                data=audio.file.read(),
            )

        state_cfg: AppConfig = request.app.state.cfg
        result = request.app.state.pipeline.evaluate(upload)
        return AnalysisResponse(**build_report(result, state_cfg.registry, state_cfg.performance_levels))

    return app
