# yt_transcriber/runner.py
"""
End-to-end run: URL -> verified audio -> metadata -> transcript.

Order matters:
1. Validate the URL (no side effects on failure)
2. Create the working area
3. Acquire verified audio (cache / download / verify)
4. Persist metadata.json
5. Transcribe and persist transcript.txt

Errors propagate to the caller; nothing partial is written on failure.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from yt_transcriber.acquisition import (
    AcquisitionOrchestrator,
    AcquisitionResult,
    DurationOracle,
    FileCacheStore,
    YtDlpFetcher,
    extract_video_id,
)
from yt_transcriber.config import Settings
from yt_transcriber.logging_core.logger import get_logger, log_event
from yt_transcriber.output.writer import create_working_area, write_metadata, write_transcript
from yt_transcriber.transcription import (
    TranscriptionConfig,
    TranscriptionError,
    TranscriptionResult,
    WhisperModelSize,
    transcribe_audio,
)


Transcriber = Callable[[Path, TranscriptionConfig], TranscriptionResult]


@dataclass
class RunResult:
    working_area: Path
    acquisition: AcquisitionResult
    metadata_path: Path
    transcript_path: Optional[Path] = None
    transcript_text: Optional[str] = None


def build_orchestrator(settings: Settings, run_id: uuid.UUID) -> AcquisitionOrchestrator:
    """Wire the real collaborators from settings."""
    return AcquisitionOrchestrator(
        fetcher=YtDlpFetcher(sample_rate=settings.sample_rate, socket_timeout=settings.socket_timeout),
        cache=FileCacheStore(settings.cache_dir),
        oracle=DurationOracle(tolerance=settings.tolerance, probe_timeout=settings.probe_timeout),
        run_id=run_id,
    )


def run_transcription(
    url: str,
    settings: Settings,
    *,
    transcribe: bool = True,
    orchestrator: Optional[AcquisitionOrchestrator] = None,
    transcriber: Transcriber = transcribe_audio,
    on_working_area: Optional[Callable[[Path], None]] = None,
    working_root: Optional[Path] = None,
) -> RunResult:
    """
    Execute the full pipeline for one YouTube URL.

    Args:
        url: YouTube video URL
        settings: runtime settings (cache dir, tolerance, model, ...)
        transcribe: False stops after the audio is verified
        orchestrator: pre-built orchestrator (tests inject fakes here)
        transcriber: transcription function
        on_working_area: called once the working area exists
        working_root: parent for the working area (system temp dir if None)

    Raises:
        InputError, MetadataFetchError, TransferError, VerificationMismatch,
        DurationProbeError, TranscriptionError
    """
    video_id = extract_video_id(url)

    run_id = orchestrator.run_id if orchestrator is not None else uuid.uuid4()
    logger = get_logger(run_id, settings.log_level)
    orchestrator = orchestrator or build_orchestrator(settings, run_id)

    working_area = create_working_area(working_root)
    log_event(
        logger,
        logging.INFO,
        "Working area created",
        event_type="pipeline_start",
        video_id=video_id,
        metadata={"url": url, "working_area": str(working_area)},
    )
    if on_working_area is not None:
        on_working_area(working_area)

    acquisition = orchestrator.acquire(url, working_area)
    metadata_path = write_metadata(acquisition.metadata, working_area)
    result = RunResult(working_area=working_area, acquisition=acquisition, metadata_path=metadata_path)

    if not transcribe:
        log_event(logger, logging.INFO, "Transcription skipped", event_type="pipeline_success")
        return result

    config = TranscriptionConfig(model_name=WhisperModelSize(settings.whisper_model), language=settings.language or None)
    log_event(
        logger,
        logging.INFO,
        "Starting transcription",
        stage_name="transcribe",
        event_type="start",
        metadata={"model": config.model_name.value, "language": config.language},
    )
    transcription = transcriber(acquisition.audio_path, config)
    if not transcription.success:
        log_event(
            logger,
            logging.ERROR,
            "Transcription failed",
            stage_name="transcribe",
            event_type="failure",
            metadata={"errors": transcription.errors},
        )
        raise TranscriptionError("; ".join(transcription.errors) or "Transcription failed", transcription.suggested_fixes)

    result.transcript_text = transcription.transcript_text
    result.transcript_path = write_transcript(transcription.transcript_text, working_area)
    log_event(
        logger,
        logging.INFO,
        "Transcription completed",
        stage_name="transcribe",
        event_type="success",
        metadata={"seconds": round(transcription.execution_time_sec, 2), "language": transcription.language},
    )
    return result
