"""
Download -> verify -> cache pipeline for YouTube audio.
"""

from yt_transcriber.acquisition.cache import FileCacheStore
from yt_transcriber.acquisition.duration import (
    ContainerDurationMeasurer,
    DecodedDurationMeasurer,
    DurationOracle,
)
from yt_transcriber.acquisition.errors import (
    AcquisitionError,
    DurationProbeError,
    InputError,
    MetadataFetchError,
    TransferError,
    VerificationMismatch,
)
from yt_transcriber.acquisition.fetcher import YtDlpFetcher
from yt_transcriber.acquisition.identifier import extract_video_id
from yt_transcriber.acquisition.orchestrator import AcquisitionOrchestrator
from yt_transcriber.acquisition.schema import (
    AcquisitionResult,
    AcquisitionState,
    DownloadStrategy,
    DurationVerificationResult,
    VerificationMethod,
    VideoMetadata,
)

__all__ = [
    "AcquisitionError",
    "AcquisitionOrchestrator",
    "AcquisitionResult",
    "AcquisitionState",
    "ContainerDurationMeasurer",
    "DecodedDurationMeasurer",
    "DownloadStrategy",
    "DurationOracle",
    "DurationProbeError",
    "DurationVerificationResult",
    "FileCacheStore",
    "InputError",
    "MetadataFetchError",
    "TransferError",
    "VerificationMethod",
    "VerificationMismatch",
    "VideoMetadata",
    "YtDlpFetcher",
    "extract_video_id",
]
