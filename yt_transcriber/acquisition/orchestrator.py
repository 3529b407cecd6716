# yt_transcriber/acquisition/orchestrator.py
"""
Acquisition orchestrator: "give me verified audio for this URL".

State machine over one request:

    START -> METADATA_FETCHED -> CACHE_CHECK
        hit + verified                 -> VERIFIED
        hit + mismatch (evict) / miss  -> DOWNLOAD_PRIMARY -> VERIFY_PRIMARY
    VERIFY_PRIMARY   verified -> VERIFIED
                     mismatch (evict) -> DOWNLOAD_ALTERNATE -> VERIFY_ALTERNATE
    VERIFY_ALTERNATE verified -> VERIFIED
                     mismatch (evict) -> FAILED

Any transfer failure is terminal, including on the primary strategy: the
alternate strategy only runs after a primary download that transferred but
did not verify. Metadata is fetched on every run, because the expected
duration must come from the source and never from the cache.

At most two downloads per request; no state is visited twice.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from yt_transcriber.acquisition.base import CacheStore, Fetcher, Verifier, timer
from yt_transcriber.acquisition.errors import (
    AcquisitionError,
    DurationProbeError,
    MetadataFetchError,
    TransferError,
    VerificationMismatch,
)
from yt_transcriber.acquisition.identifier import canonical_url, extract_video_id
from yt_transcriber.acquisition.schema import (
    AcquisitionResult,
    AcquisitionState,
    DownloadStrategy,
    DurationVerificationResult,
    VideoMetadata,
)
from yt_transcriber.logging_core.logger import get_logger, log_event


AUDIO_FILENAME = "audio.mp3"

ESCALATION: Tuple[Tuple[DownloadStrategy, AcquisitionState, AcquisitionState], ...] = (
    (DownloadStrategy.PRIMARY, AcquisitionState.DOWNLOAD_PRIMARY, AcquisitionState.VERIFY_PRIMARY),
    (DownloadStrategy.ALTERNATE, AcquisitionState.DOWNLOAD_ALTERNATE, AcquisitionState.VERIFY_ALTERNATE),
)


class _Run:
    """Mutable bookkeeping for a single acquire() call."""

    def __init__(self, video_id: str, working_area: Path) -> None:
        self.video_id = video_id
        self.working_area = working_area
        self.states: List[AcquisitionState] = []
        self.verifications: List[DurationVerificationResult] = []
        self.download_attempts = 0


class AcquisitionOrchestrator:
    """Composes a fetcher, a cache store and a duration verifier."""

    def __init__(
        self,
        fetcher: Fetcher,
        cache: CacheStore,
        oracle: Verifier,
        run_id: Optional[uuid.UUID] = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.oracle = oracle
        self.run_id = run_id or uuid.uuid4()
        self.logger = get_logger(self.run_id)

    def _enter(
        self,
        run: _Run,
        state: AcquisitionState,
        message: str,
        level: int = logging.INFO,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        run.states.append(state)
        event_type = {AcquisitionState.VERIFIED: "success", AcquisitionState.FAILED: "failure"}.get(state, "progress")
        log_event(
            self.logger,
            level,
            message,
            stage_name=state.value,
            event_type=event_type,
            video_id=run.video_id,
            metadata=metadata,
        )

    def _fail(self, run: _Run, error: AcquisitionError) -> AcquisitionError:
        self._enter(
            run,
            AcquisitionState.FAILED,
            "Acquisition failed",
            level=logging.ERROR,
            metadata={"error": error.message, "error_type": type(error).__name__},
        )
        return error

    def _verify(self, run: _Run, audio_file: Path, metadata: VideoMetadata) -> DurationVerificationResult:
        try:
            result = self.oracle.verify(audio_file, metadata.duration)
        except DurationProbeError as exc:
            raise self._fail(run, exc)
        run.verifications.append(result)
        log_event(
            self.logger,
            logging.INFO if result.match else logging.WARNING,
            "Duration verified" if result.match else "Duration mismatch",
            stage_name=run.states[-1].value,
            event_type="progress",
            video_id=run.video_id,
            metadata=result.model_dump(mode="json"),
        )
        return result

    def _discard(self, run: _Run, audio_file: Path) -> None:
        """Drop an unverified download, wherever the fetcher put it."""
        self.cache.evict(run.video_id)
        Path(audio_file).unlink(missing_ok=True)

    def acquire(self, url: str, working_area: Path) -> AcquisitionResult:
        """
        Produce verified audio for url inside working_area.

        Raises:
            InputError: url is not a supported YouTube URL (nothing touched)
            MetadataFetchError: metadata unavailable
            TransferError: a download strategy failed outright
            VerificationMismatch: no strategy produced audio of the right length
            DurationProbeError: an audio file could not be opened for measuring
        """
        video_id = extract_video_id(url)
        run = _Run(video_id, Path(working_area))
        source_url = canonical_url(video_id)

        with timer() as end:
            self._enter(run, AcquisitionState.START, "Starting audio acquisition", metadata={"url": url})

            try:
                metadata = self.fetcher.fetch_metadata(source_url)
            except MetadataFetchError as exc:
                raise self._fail(run, exc)
            self._enter(
                run,
                AcquisitionState.METADATA_FETCHED,
                "Metadata fetched",
                metadata={"title": metadata.title, "duration": metadata.duration},
            )

            self._enter(run, AcquisitionState.CACHE_CHECK, "Checking audio cache")
            cached = self.cache.get(video_id)
            if cached is not None:
                if self._verify(run, cached, metadata).match:
                    return self._finish(run, metadata, cached, from_cache=True, elapsed=end)
                self.cache.evict(video_id)
                log_event(
                    self.logger,
                    logging.WARNING,
                    "Cached audio failed verification; evicted",
                    stage_name=AcquisitionState.CACHE_CHECK.value,
                    event_type="progress",
                    video_id=video_id,
                    metadata={"path": str(cached)},
                )

            destination = self.cache.path_for(video_id)
            result = None
            for strategy, download_state, verify_state in ESCALATION:
                self._enter(run, download_state, f"Downloading audio ({strategy.value} strategy)")
                run.download_attempts += 1
                try:
                    audio_file = self.fetcher.fetch_audio(source_url, strategy, destination)
                except TransferError as exc:
                    raise self._fail(run, exc)

                self._enter(run, verify_state, f"Verifying {strategy.value} download")
                try:
                    result = self._verify(run, audio_file, metadata)
                except DurationProbeError:
                    self._discard(run, audio_file)
                    raise
                if result.match:
                    cached = self.cache.put(video_id, audio_file)
                    return self._finish(run, metadata, cached, from_cache=False, elapsed=end)
                self._discard(run, audio_file)

            raise self._fail(
                run,
                VerificationMismatch(
                    f"Audio duration {result.actual:.2f}s does not match expected "
                    f"{result.expected:.2f}s after {run.download_attempts} download attempts",
                    result=result,
                ),
            )

    def _finish(
        self, run: _Run, metadata: VideoMetadata, audio_file: Path, from_cache: bool, elapsed: Callable[[], float]
    ) -> AcquisitionResult:
        working_audio = run.working_area / AUDIO_FILENAME
        shutil.copyfile(audio_file, working_audio)
        self._enter(
            run,
            AcquisitionState.VERIFIED,
            "Audio verified",
            metadata={"from_cache": from_cache, "download_attempts": run.download_attempts},
        )
        return AcquisitionResult(
            video_id=run.video_id,
            metadata=metadata,
            cache_path=Path(audio_file),
            audio_path=working_audio,
            from_cache=from_cache,
            download_attempts=run.download_attempts,
            verifications=run.verifications,
            states=run.states,
            execution_time_ms=elapsed(),
        )
