# yt_transcriber/output/writer.py
"""
Per-run working area and the artifacts written into it.

A working area is a fresh private directory created for one invocation and
never reused. It ends up holding:
    audio.mp3       copied from the verified cache entry
    metadata.json   the VideoMetadata fetched for this run
    transcript.txt  the transcript, written only on success
Cleaning it up is the caller's business.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from yt_transcriber.acquisition.schema import VideoMetadata


METADATA_FILENAME = "metadata.json"
TRANSCRIPT_FILENAME = "transcript.txt"
WORKING_AREA_PREFIX = "yt-transcriber-"


def create_working_area(parent: Path | str | None = None) -> Path:
    """Create a fresh working directory (mode 0700)."""
    return Path(tempfile.mkdtemp(prefix=WORKING_AREA_PREFIX, dir=parent))


def write_metadata(metadata: VideoMetadata, working_area: Path) -> Path:
    path = Path(working_area) / METADATA_FILENAME
    payload = metadata.model_dump(mode="json")
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def write_transcript(text: str, working_area: Path) -> Path:
    path = Path(working_area) / TRANSCRIPT_FILENAME
    path.write_text(text.rstrip("\n") + "\n", encoding="utf-8")
    return path
