# yt_transcriber/acquisition/schema.py
"""
Schema definitions for the audio acquisition pipeline.

This module defines:
- VideoMetadata, the record fetched fresh from the source on every run
- DurationVerificationResult, produced by every verification call
- The acquisition state machine states and download strategies
- AcquisitionResult, returned to the caller on success
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VerificationMethod(str, Enum):
    """How the actual duration of an audio file was measured."""
    SAMPLE_COUNT = "sample_count"
    FFPROBE_FALLBACK = "ffprobe_fallback"


class DownloadStrategy(str, Enum):
    """Ways of asking the source client for an audio file."""
    PRIMARY = "primary"
    ALTERNATE = "alternate"


class AcquisitionState(str, Enum):
    START = "START"
    METADATA_FETCHED = "METADATA_FETCHED"
    CACHE_CHECK = "CACHE_CHECK"
    DOWNLOAD_PRIMARY = "DOWNLOAD_PRIMARY"
    VERIFY_PRIMARY = "VERIFY_PRIMARY"
    DOWNLOAD_ALTERNATE = "DOWNLOAD_ALTERNATE"
    VERIFY_ALTERNATE = "VERIFY_ALTERNATE"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"


class VideoMetadata(BaseModel):
    """Immutable origin facts for one video."""
    video_id: str
    title: Optional[str] = None
    channel: Optional[str] = None
    upload_date: Optional[str] = None
    duration: float
    webpage_url: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    language: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class DurationVerificationResult(BaseModel):
    match: bool
    actual: float
    expected: float
    difference: float
    method: VerificationMethod

    model_config = ConfigDict(frozen=True)


class AcquisitionResult(BaseModel):
    """Outcome of a successful acquisition."""
    video_id: str
    metadata: VideoMetadata
    cache_path: Path
    audio_path: Path
    from_cache: bool
    download_attempts: int = 0
    verifications: List[DurationVerificationResult] = Field(default_factory=list)
    states: List[AcquisitionState] = Field(default_factory=list)
    execution_time_ms: Optional[float] = None
