# yt_transcriber/transcription/whisper.py
"""
Whisper transcription of a verified audio file.
Models are cached module-level per (name, device); device is picked once:
CUDA, then Apple Silicon MPS, then CPU.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from yt_transcriber.transcription.schema import TranscriptionConfig, TranscriptionResult

# Module-level cache
_MODELS: Dict[Tuple[str, str], Any] = {}
_DEVICE: Optional[str] = None


def select_device() -> str:
    global _DEVICE  # pylint: disable=global-statement
    if _DEVICE is None:
        import torch

        if torch.cuda.is_available():
            _DEVICE = "cuda"
        elif hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
            _DEVICE = "mps"
        else:
            _DEVICE = "cpu"
    return _DEVICE


def _load_model(model_name: str, device: str) -> Any:
    key = (model_name, device)
    if key not in _MODELS:
        import whisper

        _MODELS[key] = whisper.load_model(model_name, device=device)
    return _MODELS[key]


def transcribe_audio(audio_path: Path | str, config: Optional[TranscriptionConfig] = None) -> TranscriptionResult:
    """Run whisper on audio_path. Never returns a partial transcript on failure."""
    config = config or TranscriptionConfig()
    start = time.time()
    model_name = getattr(config.model_name, "value", config.model_name)
    try:
        device = select_device()
        model = _load_model(model_name, device)
        # fp16 is only supported on CUDA
        output = model.transcribe(str(audio_path), language=config.language, fp16=(device == "cuda"))
    except Exception as e:  # pylint: disable=broad-except
        return TranscriptionResult(
            success=False,
            errors=[f"Whisper transcription failed: {e}"],
            suggested_fixes=["Ensure openai-whisper and ffmpeg are installed", "Try a smaller model"],
            execution_time_sec=time.time() - start,
        )

    text = (output.get("text") or "").strip()
    if not text:
        return TranscriptionResult(
            success=False,
            method="whisper",
            errors=["Whisper returned empty transcript"],
            suggested_fixes=["Check audio quality", "Try larger model"],
            execution_time_sec=time.time() - start,
        )

    return TranscriptionResult(
        success=True,
        transcript_text=text,
        method="whisper",
        language=output.get("language") or config.language,
        execution_time_sec=time.time() - start,
    )
