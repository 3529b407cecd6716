# yt_transcriber/cli/youtube.py
"""
CLI entrypoint: transcribe a YouTube video.

Thin adapter, no business logic:
- Parse arguments
- Invoke the run pipeline
- Transcript to stdout; status lines, diagnostics and JSON logs to stderr

Exit status: 0 success, 1 invalid URL / fetch / verification / transcription
failure, 2 usage error.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from yt_transcriber.acquisition.errors import AcquisitionError, ConfigurationError, InputError
from yt_transcriber.config import get_settings
from yt_transcriber.runner import run_transcription
from yt_transcriber.transcription import TranscriptionError, WhisperModelSize


app = typer.Typer(
    name="yt-transcriber",
    help="Download, verify and transcribe the audio of a YouTube video.",
    add_completion=False,
)


def _fail(headline: str, message: str, fixes: List[str]) -> NoReturn:
    typer.echo(typer.style(f"✗ {headline}", fg=typer.colors.RED, bold=True), err=True)
    typer.echo(f"Error: {message}", err=True)
    for fix in fixes:
        typer.echo(f"  - {fix}", err=True)
    sys.exit(1)


@app.command()
def transcribe(
    url: str = typer.Argument(..., help="YouTube video URL (youtube.com/watch?v=... or youtu.be/...)"),
    model: Optional[WhisperModelSize] = typer.Option(
        None, "--model", "-m", help="Whisper model tier (default: base, or $YT_TRANSCRIBER_MODEL)"
    ),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Spoken language code, e.g. en"),
    cache_dir: Optional[Path] = typer.Option(
        None, "--cache-dir", help="Audio cache directory (default: /tmp/yt-transcriber)"
    ),
    no_transcribe: bool = typer.Option(
        False, "--no-transcribe", help="Stop after the audio is downloaded and verified"
    ),
) -> None:
    """
    Fetch verified audio for URL and print its transcript.
    """
    try:
        settings = get_settings().with_overrides(
            whisper_model=model.value if model is not None else None,
            language=language,
            cache_dir=cache_dir.expanduser() if cache_dir is not None else None,
        )
    except ConfigurationError as exc:
        _fail("Invalid configuration", exc.message, [f"Check {exc.field_name}"] if exc.field_name else [])

    def announce(working_area: Path) -> None:
        typer.echo(f"Working directory: {working_area}", err=True)

    try:
        result = run_transcription(
            url,
            settings,
            transcribe=not no_transcribe,
            on_working_area=announce,
        )
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user.", err=True)
        sys.exit(1)
    except InputError as exc:
        _fail("Invalid input", exc.message, exc.suggested_fixes)
    except AcquisitionError as exc:
        _fail("Audio acquisition failed", exc.message, exc.suggested_fixes)
    except TranscriptionError as exc:
        _fail("Transcription failed", exc.message, exc.suggested_fixes)
    except Exception as exc:  # pylint: disable=broad-except
        _fail(
            "Transcription failed",
            f"{type(exc).__name__}: {exc}",
            ["See structured JSON logs above for detailed diagnostics"],
        )

    source = "cache" if result.acquisition.from_cache else f"{result.acquisition.download_attempts} download(s)"
    typer.echo(typer.style(f"✓ Audio verified ({source})", fg=typer.colors.GREEN, bold=True), err=True)
    typer.echo(f"Audio: {result.acquisition.audio_path}", err=True)
    typer.echo(f"Metadata: {result.metadata_path}", err=True)

    if result.transcript_text is not None:
        typer.echo(f"Transcript: {result.transcript_path}", err=True)
        typer.echo(result.transcript_text)


if __name__ == "__main__":
    app()
