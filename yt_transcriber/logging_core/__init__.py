"""Structured logging for yt-transcriber."""
