# yt_transcriber/acquisition/cache.py
"""
Read-through audio cache keyed by video identifier.

One mp3 per identifier at <root>/<video_id>.mp3. The store only answers
"is there a file"; whether the bytes are any good is the duration oracle's
call. There is no locking: two runs on the same identifier can race.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from yt_transcriber.acquisition.identifier import is_valid_video_id


logger = logging.getLogger(__name__)

AUDIO_EXTENSION = "mp3"
CACHE_DIR_MODE = 0o700


class FileCacheStore:
    """Cache store backed by a single shared directory."""

    def __init__(self, root: Path | str, extension: str = AUDIO_EXTENSION) -> None:
        self.root = Path(root)
        self.extension = extension

    def _ensure_root(self) -> None:
        if not self.root.is_dir():
            self.root.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
            logger.debug("Created cache directory %s", self.root)

    def path_for(self, video_id: str) -> Path:
        """Deterministic entry location; creates the cache root on first use."""
        if not is_valid_video_id(video_id):
            raise ValueError(f"Invalid video identifier for cache key: {video_id!r}")
        self._ensure_root()
        return self.root / f"{video_id}.{self.extension}"

    def get(self, video_id: str) -> Optional[Path]:
        path = self.path_for(video_id)
        return path if path.is_file() else None

    def put(self, video_id: str, source: Path | str) -> Path:
        """Store source as the entry for video_id. Last writer wins."""
        path = self.path_for(video_id)
        source = Path(source)
        if source.resolve() != path.resolve():
            shutil.copyfile(source, path)
        return path

    def evict(self, video_id: str) -> bool:
        """Delete the entry if present. Returns True if a file was removed."""
        path = self.path_for(video_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Evicted cache entry %s", path)
        return True
