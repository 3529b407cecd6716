"""yt-transcriber: verified YouTube audio acquisition and transcription."""

__version__ = "0.1.0"
