"""
Shared fakes for the acquisition tests.

No network, no ffmpeg: the fake fetcher writes a file whose content is the
duration it should measure as, and ContentDurationMeasurer reads it back.
Anything unparseable (such as a block of zero bytes) is inconclusive.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pytest

from yt_transcriber.acquisition.cache import FileCacheStore
from yt_transcriber.acquisition.duration import DurationOracle
from yt_transcriber.acquisition.errors import TransferError
from yt_transcriber.acquisition.orchestrator import AcquisitionOrchestrator
from yt_transcriber.acquisition.schema import DownloadStrategy, VerificationMethod, VideoMetadata


VIDEO_ID = "jNQXAC9IVRw"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"
VIDEO_DURATION = 19.0


class ContentDurationMeasurer:
    """Reads the duration written into the file by FakeFetcher."""

    method = VerificationMethod.SAMPLE_COUNT

    def __init__(self):
        self.calls: List[Path] = []

    def measure(self, audio_file: Path) -> Optional[float]:
        self.calls.append(Path(audio_file))
        try:
            return float(Path(audio_file).read_bytes().decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            return None


class FakeFetcher:
    """
    Fetcher double.

    downloads maps a strategy to the duration its file should measure as,
    or to an exception to raise instead.
    """

    def __init__(
        self,
        metadata: Optional[VideoMetadata] = None,
        downloads: Optional[Dict[DownloadStrategy, Union[float, Exception]]] = None,
        metadata_error: Optional[Exception] = None,
    ):
        self.metadata = metadata or make_metadata()
        self.downloads = downloads if downloads is not None else {DownloadStrategy.PRIMARY: VIDEO_DURATION}
        self.metadata_error = metadata_error
        self.metadata_calls: List[str] = []
        self.audio_calls: List[Tuple[str, DownloadStrategy, Path]] = []
        self.destination_existed: List[bool] = []

    def fetch_metadata(self, url: str) -> VideoMetadata:
        self.metadata_calls.append(url)
        if self.metadata_error is not None:
            raise self.metadata_error
        return self.metadata

    def fetch_audio(self, url: str, strategy: DownloadStrategy, destination: Path) -> Path:
        self.audio_calls.append((url, strategy, destination))
        self.destination_existed.append(destination.exists())
        outcome = self.downloads.get(strategy, TransferError(f"{strategy.value} unavailable", strategy=strategy))
        if isinstance(outcome, Exception):
            raise outcome
        # repr keeps the full float so the measurer reads back exactly this value
        destination.write_bytes(repr(float(outcome)).encode("ascii"))
        return destination


def make_metadata(duration: float = VIDEO_DURATION) -> VideoMetadata:
    return VideoMetadata(
        video_id=VIDEO_ID,
        title="Me at the zoo",
        channel="jawed",
        upload_date="20050424",
        duration=duration,
        webpage_url=VIDEO_URL,
    )


@pytest.fixture
def cache(tmp_path):
    return FileCacheStore(tmp_path / "cache")


@pytest.fixture
def working_area(tmp_path):
    area = tmp_path / "work"
    area.mkdir()
    return area


@pytest.fixture
def measurer():
    return ContentDurationMeasurer()


@pytest.fixture
def oracle(measurer):
    return DurationOracle(measurers=[measurer])


@pytest.fixture
def make_orchestrator(cache, oracle):
    def _make(fetcher):
        return AcquisitionOrchestrator(fetcher=fetcher, cache=cache, oracle=oracle)
    return _make

