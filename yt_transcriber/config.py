# yt_transcriber/config.py
"""
Runtime settings, read from the environment (and a local .env if present).

CLI flags override these values per invocation.

Duration tolerance is 1.0s. YT_TRANSCRIBER_TOLERANCE is a troubleshooting
override and is left unset in normal use.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from yt_transcriber.acquisition.errors import ConfigurationError
from yt_transcriber.transcription.schema import WhisperModelSize


load_dotenv()

DEFAULT_CACHE_DIR = "/tmp/yt-transcriber"


@dataclass(frozen=True)
class Settings:
    cache_dir: Path
    sample_rate: int = 16000
    tolerance: float = 1.0
    whisper_model: str = "base"
    language: str = "en"
    socket_timeout: float = 30.0
    probe_timeout: float = 300.0
    log_level: str = "INFO"

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _number(name: str, default: str, cast):
    raw = os.getenv(name, default).strip()
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", field_name=name) from None


def get_settings() -> Settings:
    model = os.getenv("YT_TRANSCRIBER_MODEL", "base").strip()
    if model not in {m.value for m in WhisperModelSize}:
        raise ConfigurationError(f"Unknown whisper model {model!r}", field_name="YT_TRANSCRIBER_MODEL")

    cache_dir = os.getenv("YT_TRANSCRIBER_CACHE_DIR", DEFAULT_CACHE_DIR).strip() or DEFAULT_CACHE_DIR
    return Settings(
        cache_dir=Path(cache_dir).expanduser(),
        sample_rate=_number("YT_TRANSCRIBER_SAMPLE_RATE", "16000", int),
        tolerance=_number("YT_TRANSCRIBER_TOLERANCE", "1.0", float),
        whisper_model=model,
        language=os.getenv("YT_TRANSCRIBER_LANGUAGE", "en").strip(),
        socket_timeout=_number("YT_TRANSCRIBER_SOCKET_TIMEOUT", "30", float),
        probe_timeout=_number("YT_TRANSCRIBER_PROBE_TIMEOUT", "300", float),
        log_level=_log_level(),
    )


def _log_level() -> str:
    name = os.getenv("YT_TRANSCRIBER_LOG_LEVEL", "INFO").strip().upper()
    # getLevelName maps a known name to its number, anything else to "Level <name>"
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigurationError(f"Unknown log level {name!r}", field_name="YT_TRANSCRIBER_LOG_LEVEL")
    return name
