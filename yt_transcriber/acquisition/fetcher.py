# yt_transcriber/acquisition/fetcher.py
"""
Remote source client built on yt-dlp.

Responsibility:
- fetch_metadata: title, channel, upload date, duration, canonical URL
  (no media downloaded)
- fetch_audio: produce a normalized mp3 at a destination path using one of
  two strategies:
    primary   -> audio-only stream, extracted to mp3
    alternate -> best video+audio streams, then extracted to mp3
  Some videos serve an incomplete audio-only stream but a complete combined
  one; the alternate strategy exists for them.

Transfer failure (yt-dlp error, or no file at the destination afterwards)
raises TransferError. Choosing whether to try the other strategy is the
orchestrator's job.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yt_dlp

from yt_transcriber.acquisition.errors import MetadataFetchError, TransferError
from yt_transcriber.acquisition.schema import DownloadStrategy, VideoMetadata


logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 16000

METADATA_PARAMS: Dict[str, Any] = {
    "quiet": True,
    "no_warnings": True,
    "extract_flat": False,
    "skip_download": True,
    "noplaylist": True,
}

STRATEGY_FORMATS: Dict[DownloadStrategy, str] = {
    DownloadStrategy.PRIMARY: "bestaudio",
    DownloadStrategy.ALTERNATE: "bestvideo+bestaudio/best",
}


def _source_fixes(error: Exception) -> list[str]:
    message = str(error).lower()
    fixes = [
        "Check if video is public and not deleted",
        "Try again later (transient YouTube issue)",
    ]
    if "age-restricted" in message or "sign in" in message:
        fixes.append("Provide cookies.txt with logged-in session")
    return fixes


class YtDlpFetcher:
    """Metadata and audio retrieval through the yt-dlp Python API."""

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE, socket_timeout: Optional[float] = None) -> None:
        self.sample_rate = sample_rate
        self.socket_timeout = socket_timeout

    def _base_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.socket_timeout is not None:
            params["socket_timeout"] = self.socket_timeout
        return params

    def fetch_metadata(self, url: str) -> VideoMetadata:
        params = {**METADATA_PARAMS, **self._base_params()}
        try:
            with yt_dlp.YoutubeDL(params) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as exc:
            raise MetadataFetchError(f"Metadata fetch failed: {exc}", _source_fixes(exc)) from exc

        if not info:
            raise MetadataFetchError(f"No metadata returned for {url}")

        duration = info.get("duration")
        if not isinstance(duration, (int, float)) or isinstance(duration, bool):
            raise MetadataFetchError(
                f"Source did not report a duration for {url}",
                ["Live streams and premieres cannot be verified; wait until the video is processed"],
            )

        return VideoMetadata(
            video_id=info.get("id") or "",
            title=info.get("title"),
            channel=info.get("channel") or info.get("uploader"),
            upload_date=info.get("upload_date"),
            duration=float(duration),
            webpage_url=info.get("webpage_url") or url,
            description=info.get("description"),
            tags=info.get("tags"),
            language=info.get("language"),
        )

    def _download_params(self, strategy: DownloadStrategy, destination: Path) -> Dict[str, Any]:
        # yt-dlp picks the final extension itself; point the template at the same stem
        output_template = str(destination.with_suffix("")) + ".%(ext)s"
        return {
            **self._base_params(),
            "format": STRATEGY_FORMATS[strategy],
            "outtmpl": output_template,
            "noplaylist": True,
            "overwrites": True,
            "quiet": True,
            "no_warnings": True,
            "postprocessors": [{
                "key": "FFmpegExtractAudio",
                "preferredcodec": destination.suffix.lstrip(".") or "mp3",
            }],
            "postprocessor_args": {"extractaudio": ["-ar", str(self.sample_rate)]},
        }

    def fetch_audio(self, url: str, strategy: DownloadStrategy, destination: Path) -> Path:
        destination = Path(destination)
        params = self._download_params(strategy, destination)
        logger.debug("Downloading %s with %s strategy (format=%s)", url, strategy.value, params["format"])

        try:
            with yt_dlp.YoutubeDL(params) as ydl:
                retcode = ydl.download([url])
        except yt_dlp.utils.DownloadError as exc:
            raise TransferError(
                f"{strategy.value} download failed: {exc}", strategy=strategy, suggested_fixes=_source_fixes(exc)
            ) from exc

        if retcode:
            raise TransferError(f"{strategy.value} download exited with status {retcode}", strategy=strategy)
        if not destination.is_file():
            raise TransferError(
                f"{strategy.value} download produced no file at {destination}",
                strategy=strategy,
            )
        return destination
