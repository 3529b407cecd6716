# yt_transcriber/acquisition/duration.py
"""
Duration oracle: decides whether an audio file is a complete download.

Measurement is an ordered list of methods, tried in sequence:

1. sample_count: run a full ffmpeg decode pass to the null muxer and take the
   last progress timestamp (time=HH:MM:SS.ss). This is how much audio was
   actually decodable, so it catches truncated files with an intact header.
2. ffprobe_fallback: the container's self-declared duration.

Each method returns seconds or None (inconclusive). Only a path that cannot
be opened at all, or a measuring tool that cannot be started, raises.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

import ffmpeg

from yt_transcriber.acquisition.base import DurationMeasurer
from yt_transcriber.acquisition.errors import DurationProbeError
from yt_transcriber.acquisition.schema import DurationVerificationResult, VerificationMethod


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1.0

PROGRESS_TIME_PATTERN = re.compile(r"time=(\d+):(\d{1,2}):(\d{1,2}(?:\.\d+)?)")


def parse_last_timestamp(progress_output: str) -> Optional[float]:
    """Return the last time=H:M:S in ffmpeg progress output, in seconds."""
    matches = PROGRESS_TIME_PATTERN.findall(progress_output)
    if not matches:
        return None
    hours, minutes, seconds = matches[-1]
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


class DecodedDurationMeasurer:
    """Duration from a full decode pass (what is actually playable)."""

    method = VerificationMethod.SAMPLE_COUNT

    def __init__(self, timeout: Optional[float] = None, cmd: str = "ffmpeg") -> None:
        self.timeout = timeout
        self.cmd = cmd

    def _decode(self, audio_file: Path) -> str:
        process = (
            ffmpeg
            .input(str(audio_file))
            .output("-", format="null")
            .global_args("-nostdin", "-hide_banner", "-stats")
            .run_async(cmd=self.cmd, pipe_stdout=True, pipe_stderr=True)
        )
        try:
            _, stderr = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            raise
        if process.returncode:
            logger.debug("ffmpeg decode of %s exited with %s", audio_file, process.returncode)
        return stderr.decode("utf-8", errors="replace") if isinstance(stderr, bytes) else (stderr or "")

    def measure(self, audio_file: Path) -> Optional[float]:
        try:
            output = self._decode(audio_file)
        except subprocess.TimeoutExpired:
            logger.warning("ffmpeg decode of %s timed out after %ss", audio_file, self.timeout)
            return None
        # A failed decode still reports how far it got.
        return parse_last_timestamp(output)


class ContainerDurationMeasurer:
    """Duration as declared by the container, via ffprobe."""

    method = VerificationMethod.FFPROBE_FALLBACK

    def __init__(self, timeout: Optional[float] = None, cmd: str = "ffprobe") -> None:
        self.timeout = timeout
        self.cmd = cmd

    def measure(self, audio_file: Path) -> Optional[float]:
        try:
            probe = ffmpeg.probe(str(audio_file), cmd=self.cmd, timeout=self.timeout)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if isinstance(e.stderr, bytes) else str(e.stderr or "")
            logger.debug("ffprobe failed for %s: %s", audio_file, stderr.strip())
            return None
        except subprocess.TimeoutExpired:
            logger.warning("ffprobe of %s timed out after %ss", audio_file, self.timeout)
            return None

        candidates = [probe.get("format", {}).get("duration")]
        candidates += [s.get("duration") for s in probe.get("streams", []) if s.get("codec_type") == "audio"]
        for value in candidates:
            try:
                return float(value)
            except (TypeError, ValueError):
                continue
        return None


class DurationOracle:
    """
    verify(audio_file, expected_duration) -> DurationVerificationResult

    If every measurer is inconclusive the file is treated as 0 seconds long
    and reported under the last method tried.
    """

    def __init__(
        self,
        measurers: Optional[Sequence[DurationMeasurer]] = None,
        tolerance: float = DEFAULT_TOLERANCE,
        probe_timeout: Optional[float] = None,
    ) -> None:
        if measurers is None:
            measurers = [
                DecodedDurationMeasurer(timeout=probe_timeout),
                ContainerDurationMeasurer(timeout=probe_timeout),
            ]
        if not measurers:
            raise ValueError("DurationOracle needs at least one measurer")
        self.measurers: List[DurationMeasurer] = list(measurers)
        self.tolerance = tolerance

    def measure(self, audio_file: Path) -> tuple[float, VerificationMethod]:
        path = Path(audio_file)
        if not path.is_file():
            raise DurationProbeError(f"Audio file not found: {path}", file_path=str(path))

        for measurer in self.measurers:
            try:
                actual = measurer.measure(path)
            except OSError as exc:
                # ffmpeg/ffprobe missing or not executable
                raise DurationProbeError(
                    f"Could not run {measurer.method.value} measurement on {path}: {exc}",
                    file_path=str(path),
                ) from exc
            if actual is not None:
                return actual, measurer.method
            logger.debug("%s inconclusive for %s", measurer.method.value, path)
        return 0.0, self.measurers[-1].method

    def verify(
        self, audio_file: Path, expected_duration: float, tolerance: Optional[float] = None
    ) -> DurationVerificationResult:
        tolerance = self.tolerance if tolerance is None else tolerance
        actual, method = self.measure(audio_file)
        difference = abs(actual - expected_duration)
        return DurationVerificationResult(
            match=difference <= tolerance,
            actual=actual,
            expected=expected_duration,
            difference=difference,
            method=method,
        )
