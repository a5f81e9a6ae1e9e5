from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ["httpx", "httpcore", "openai"]


def setup_logging(cfg_logging: Dict[str, Any]) -> None:
    if cfg_logging is not None and not cfg_logging.get("enabled", True):
        return
    cfg_logging = cfg_logging or {}

    level_name = str(cfg_logging.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if cfg_logging.get("file_path"):
        file_path = Path(cfg_logging["file_path"])
        file_path.parent.mkdir(parents=True, exist_ok=True)

        max_bytes = int(cfg_logging.get("max_bytes", 1_048_576))
        backup_count = int(cfg_logging.get("backup_count", 5))

        handler = RotatingFileHandler(
            file_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
