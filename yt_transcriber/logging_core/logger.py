# yt_transcriber/logging_core/logger.py
"""
Centralized structured logging for yt-transcriber.

Provides a pre-configured logger that emits JSON lines with fields:
- timestamp (ISO)
- run_id
- video_id (optional, the video being acquired)
- stage_name (optional, filled by caller)
- event_type (start/success/failure/progress)
- level
- message
- metadata (dict)

Logs go to stderr. Stdout is reserved for the transcript.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from logging import Logger


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "run_id"):
            log_record["run_id"] = str(record.run_id)

        for field in ("video_id", "stage_name", "event_type", "metadata"):
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class _RunIdFilter(logging.Filter):
    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id  # type: ignore[attr-defined]
        return True


# One logger per run_id
_loggers: Dict[str, Logger] = {}


def get_logger(run_id: UUID, level: int | str | None = None) -> Logger:
    """
    Return a configured logger for the given run.

    Idempotent per run_id: repeated calls return the same instance and
    never stack handlers. An explicit level is applied even to an existing
    logger; None leaves it as is (INFO for a new one).
    """
    run_id_str = str(run_id)

    if run_id_str in _loggers:
        logger = _loggers[run_id_str]
        if level is not None:
            logger.setLevel(level)
        return logger

    logger = logging.getLogger(f"yt_transcriber.run.{run_id_str}")
    logger.setLevel(level if level is not None else logging.INFO)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    logger.addFilter(_RunIdFilter(run_id_str))
    _loggers[run_id_str] = logger
    return logger


def log_event(
    logger: Logger,
    level: int,
    message: str,
    *,
    stage_name: str | None = None,
    event_type: str,
    video_id: str | None = None,
    metadata: Dict[str, Any] | None = None,
) -> None:
    """Convenience wrapper for structured logging."""
    extra: Dict[str, Any] = {"event_type": event_type}
    if video_id:
        extra["video_id"] = video_id
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata

    logger.log(level, message, extra=extra)
