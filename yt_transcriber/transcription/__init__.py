"""Speech-to-text over verified audio."""

from yt_transcriber.transcription.schema import (
    TranscriptionConfig,
    TranscriptionError,
    TranscriptionResult,
    WhisperModelSize,
)
from yt_transcriber.transcription.whisper import transcribe_audio

__all__ = ["TranscriptionConfig", "TranscriptionError", "TranscriptionResult", "WhisperModelSize", "transcribe_audio"]
