# yt_transcriber/acquisition/identifier.py
"""
Input validation and video_id extraction.

Accepts exactly two URL shapes:
    https://www.youtube.com/watch?v=<id>   (www. optional, trailing &params allowed)
    https://youtu.be/<id>                  (trailing ?params allowed)

Pure and deterministic: no network, no filesystem.
"""

from __future__ import annotations

import re

from yt_transcriber.acquisition.errors import InputError


VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

YOUTUBE_URL_PATTERNS = (
    re.compile(r"^https?://(?:www\.)?youtube\.com/watch\?v=(?P<id>[a-zA-Z0-9_-]+)(?:[&#].*)?$"),
    re.compile(r"^https?://youtu\.be/(?P<id>[a-zA-Z0-9_-]+)(?:[?#].*)?$"),
)


def is_valid_video_id(video_id: str) -> bool:
    return bool(video_id) and VIDEO_ID_PATTERN.match(video_id) is not None


def extract_video_id(url: str) -> str:
    """
    Return the video identifier for a supported YouTube URL.

    Raises:
        InputError: if the URL is empty or does not match a supported shape.
    """
    if url is None or not url.strip():
        raise InputError("No URL provided", ["Provide a YouTube URL as the first argument"])

    candidate = url.strip()
    for pattern in YOUTUBE_URL_PATTERNS:
        match = pattern.match(candidate)
        if match:
            return match.group("id")

    raise InputError(f"Invalid YouTube URL: {candidate}")


def canonical_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
