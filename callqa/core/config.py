from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from callqa.core.criteria import DEFAULT_REGISTRY, CriteriaRegistry, registry_from_config
from callqa.core.errors import ConfigurationError


DEFAULT_CONTENT_TYPES = ["audio/mpeg", "audio/wav", "audio/mp3", "audio/x-wav", "audio/wave"]
DEFAULT_EXTENSIONS = ["mp3", "wav"]

PROVIDER_DEFAULTS: Dict[str, Dict[str, str]] = {
    "groq": {"base_url": "https://api.groq.com/openai/v1", "api_key_env": "GROQ_API_KEY"},
    "openai": {"base_url": "", "api_key_env": "OPENAI_API_KEY"},
    "lmstudio": {"base_url": "http://localhost:1234/v1", "api_key_env": "LM_STUDIO_API_KEY"},
}


@dataclass
class AppConfig:
    provider: Dict[str, Any] = field(default_factory=lambda: {"name": "groq"})
    transcription: Dict[str, Any] = field(
        default_factory=lambda: {
            "model": "whisper-large-v3-turbo",
            "language": "en",
            "temperature": 0.0,
        }
    )
    scoring: Dict[str, Any] = field(
        default_factory=lambda: {
            "model": "llama-3.3-70b-versatile",
            "temperature": 0.3,
            "max_output_tokens": 2000,
            "json_mode": True,
            "strict_json": False,
            "max_transcript_chars": 0,
        }
    )
    allowed_content_types: List[str] = field(default_factory=lambda: list(DEFAULT_CONTENT_TYPES))
    allowed_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    performance_levels: Dict[str, float] = field(
        default_factory=lambda: {"excellent": 85, "good": 70}
    )
    server: Dict[str, Any] = field(default_factory=lambda: {"host": "127.0.0.1", "port": 8000})
    logging: Dict[str, Any] = field(default_factory=lambda: {"level": "INFO"})
    registry: CriteriaRegistry = DEFAULT_REGISTRY

    @property
    def provider_name(self) -> str:
        return str(self.provider.get("name") or "groq").lower()

    @property
    def api_key_env(self) -> str:
        env = self.provider.get("api_key_env")
        if env:
            return str(env)
        return PROVIDER_DEFAULTS.get(self.provider_name, PROVIDER_DEFAULTS["groq"])["api_key_env"]

    @property
    def base_url(self) -> Optional[str]:
        url = self.provider.get("base_url")
        if url is None:
            url = PROVIDER_DEFAULTS.get(self.provider_name, {}).get("base_url")
        return url or None

    @property
    def request_timeout_sec(self) -> float:
        return float(self.provider.get("request_timeout_sec", 120))


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        return AppConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Cannot parse config file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    cfg = AppConfig()
    cfg.provider = {**cfg.provider, **(raw.get("provider") or {})}
    cfg.transcription = {**cfg.transcription, **(raw.get("transcription") or {})}
    cfg.scoring = {**cfg.scoring, **(raw.get("scoring") or {})}
    cfg.allowed_content_types = [
        str(t).lower() for t in raw.get("allowed_content_types") or cfg.allowed_content_types
    ]
    cfg.allowed_extensions = [
        str(e).lower().lstrip(".") for e in raw.get("allowed_extensions") or cfg.allowed_extensions
    ]
    cfg.performance_levels = {**cfg.performance_levels, **(raw.get("performance_levels") or {})}
    cfg.server = {**cfg.server, **(raw.get("server") or {})}
    cfg.logging = {**cfg.logging, **(raw.get("logging") or {})}
    if raw.get("criteria"):
        cfg.registry = registry_from_config(raw["criteria"])
    return cfg


def resolve_api_key(cfg: AppConfig) -> Optional[str]:
    key = os.getenv(cfg.api_key_env, "").strip()
    if key:
        return key
    # A local LM Studio server accepts any token.
    if cfg.provider_name == "lmstudio":
        return "lmstudio"
    return None


def is_allowed_audio(filename: str, content_type: str, cfg: AppConfig) -> bool:
    if (content_type or "").lower() in cfg.allowed_content_types:
        return True
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return ext in cfg.allowed_extensions
