# yt_transcriber/transcription/schema.py
"""
Shared contracts for the transcription subsystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class WhisperModelSize(str, Enum):
    """Whisper size/accuracy tiers, smallest and fastest first."""
    TINY = "tiny"
    BASE = "base"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    TURBO = "turbo"


@dataclass
class TranscriptionConfig:
    model_name: WhisperModelSize = WhisperModelSize.BASE
    language: Optional[str] = "en"  # None lets whisper detect it


@dataclass
class TranscriptionResult:
    """Outcome of transcribing one audio file."""
    success: bool
    transcript_text: str = ""
    method: Optional[str] = None
    language: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    suggested_fixes: List[str] = field(default_factory=list)
    execution_time_sec: float = 0.0


class TranscriptionError(Exception):
    """Transcription produced no usable text."""

    def __init__(self, message: str, suggested_fixes: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.suggested_fixes = suggested_fixes or []

    def __str__(self):
        return self.message
