# yt_transcriber/acquisition/base.py
"""
Collaborator contracts for the acquisition pipeline.

The orchestrator depends only on these protocols, so it can be exercised
with in-memory fakes instead of the network, ffmpeg, or the shared cache
directory. Also holds the timer used for execution_time_ms.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol

from yt_transcriber.acquisition.schema import (
    DownloadStrategy,
    DurationVerificationResult,
    VerificationMethod,
    VideoMetadata,
)


class MetadataFetcher(Protocol):
    def fetch_metadata(self, url: str) -> VideoMetadata: ...


class AudioFetcher(Protocol):
    def fetch_audio(self, url: str, strategy: DownloadStrategy, destination: Path) -> Path: ...


class Fetcher(MetadataFetcher, AudioFetcher, Protocol):
    """Both halves of the remote source client."""


class CacheStore(Protocol):
    def path_for(self, video_id: str) -> Path: ...

    def get(self, video_id: str) -> Optional[Path]: ...

    def put(self, video_id: str, source: Path) -> Path: ...

    def evict(self, video_id: str) -> bool: ...


class DurationMeasurer(Protocol):
    """
    One way of measuring an audio file's duration.

    measure() returns seconds, or None when the method is inconclusive
    for this file. It must not raise for an unreadable stream.
    """

    method: VerificationMethod

    def measure(self, audio_file: Path) -> Optional[float]: ...


class Verifier(Protocol):
    def verify(
        self, audio_file: Path, expected_duration: float, tolerance: Optional[float] = None
    ) -> DurationVerificationResult: ...


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Context manager yielding a callable that returns elapsed milliseconds.

    Usage:
        with timer() as end:
            ...
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end
