from __future__ import annotations

from typing import Optional

from openai import OpenAI

from callqa.core.config import AppConfig, resolve_api_key
from callqa.core.errors import ConfigurationError


def client_for_provider(cfg: AppConfig, api_key: Optional[str] = None) -> OpenAI:
    api_key = api_key or resolve_api_key(cfg)
    if not api_key:
        raise ConfigurationError(
            f"{cfg.api_key_env} not configured. Please add it to your environment"
        )
    # One call per stage: the SDK's own retry loop is switched off.
    return OpenAI(
        api_key=api_key,
        base_url=cfg.base_url,
        timeout=cfg.request_timeout_sec,
        max_retries=0,
    )
