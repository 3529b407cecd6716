"""
Error taxonomy for audio acquisition.

Every error that ends a run derives from AcquisitionError and carries
suggested fixes for the operator. A cache entry that fails verification is
not an error: it is evicted and the pipeline moves on.
"""

from __future__ import annotations

from typing import Any, List, Optional


class AcquisitionError(Exception):
    """Base class for errors that terminate an acquisition."""

    default_fixes: List[str] = []

    def __init__(self, message: str, suggested_fixes: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.suggested_fixes = list(suggested_fixes) if suggested_fixes is not None else list(self.default_fixes)

    def __str__(self):
        return self.message


class InputError(AcquisitionError):
    """Malformed or missing URL. Raised before any side effect."""

    default_fixes = [
        "Use https://www.youtube.com/watch?v=<id> or https://youtu.be/<id>",
        "Check for typos or extra characters",
    ]


class MetadataFetchError(AcquisitionError):
    """Remote metadata could not be retrieved; nothing can be verified without it."""

    default_fixes = [
        "Check if the video is public and not deleted",
        "Check internet connection",
        "Update yt-dlp",
    ]


class TransferError(AcquisitionError):
    """A download strategy's transfer failed outright."""

    default_fixes = ["Try again later (transient YouTube issue)", "Update yt-dlp", "Check ffmpeg is installed"]

    def __init__(self, message: str, strategy: Any = None, suggested_fixes: Optional[List[str]] = None):
        super().__init__(message, suggested_fixes)
        self.strategy = strategy


class VerificationMismatch(AcquisitionError):
    """Downloaded audio duration is outside tolerance and no strategy remains."""

    default_fixes = ["Retry later; the source may be serving truncated streams"]

    def __init__(self, message: str, result: Any = None, suggested_fixes: Optional[List[str]] = None):
        super().__init__(message, suggested_fixes)
        self.result = result


class DurationProbeError(AcquisitionError):
    """The audio file to measure could not be opened at all."""

    default_fixes = ["Check the cache directory permissions", "Check ffmpeg/ffprobe are on PATH"]

    def __init__(self, message: str, file_path: str = "", suggested_fixes: Optional[List[str]] = None):
        super().__init__(message, suggested_fixes)
        self.file_path = file_path


class ConfigurationError(Exception):
    """Invalid configuration value."""

    def __init__(self, message: str, field_name: str = ""):
        super().__init__(message)
        self.message = message
        self.field_name = field_name

    def __str__(self):
        base_msg = f"ConfigurationError: {self.message}"
        if self.field_name:
            base_msg += f" (Field: {self.field_name})"
        return base_msg
