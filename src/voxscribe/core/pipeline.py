"""Transcription pipeline: acquire audio, open it, recognize it.

Failures before recognition starts (configuration, acquisition, reading
the file) short-circuit the run; no session is created for them.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

import requests

from voxscribe.config import AppConfig
from voxscribe.console import ProgressRenderer, is_interactive
from voxscribe.errors import TranscriptionError
from voxscribe.io import AcquiredAudio, AudioSource, acquire_audio, is_remote
from voxscribe.models import TranscribeRequest, TranscriptResponse
from voxscribe.recognition import (
    Completed,
    Failed,
    RecognitionBackend,
    RecognitionSession,
    SessionOutcome,
    resolve_backend,
)

logger = logging.getLogger(__name__)

BackendFactory = Callable[..., RecognitionBackend]


class TranscriptionPipeline:
    """Run one source through one recognition session."""

    def __init__(
        self,
        config: AppConfig,
        *,
        backend: str | None = None,
        language: str | None = None,
        stream: TextIO | None = None,
        backend_factory: BackendFactory | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.backend_name = backend or config.backend
        self.language = language or config.language
        self._stream = stream if stream is not None else sys.stdout
        self._backend_factory = backend_factory or resolve_backend
        self._http = http

    def run(self, source: str, format_hint: str | None = None) -> SessionOutcome:
        """Transcribe `source` and return the terminal outcome."""
        try:
            backend = self.create_backend()
            audio = self.open(self.acquire(source, format_hint))
        except TranscriptionError as exc:
            logger.debug("Pipeline stopped before recognition: %s", exc)
            return Failed(exc)
        return self.recognize(backend, audio)

    def create_backend(self) -> RecognitionBackend:
        return self._backend_factory(self.backend_name, self.config, language=self.language)

    def acquire(self, source: str, format_hint: str | None = None) -> AcquiredAudio:
        """Resolve `source` to a local file, showing download progress when interactive."""
        display = _DownloadDisplay(self._stream)
        try:
            acquired = acquire_audio(
                source,
                download_dir=self.config.download_dir,
                format_hint=format_hint,
                progress=display.progress,
                on_start=display.started,
                session=self._http,
            )
        finally:
            display.dispose()
        if is_remote(source):
            display.done()
        return acquired

    def open(self, acquired: AcquiredAudio) -> AudioSource:
        audio = AudioSource.open(acquired.path, acquired.format_hint)
        logger.debug(
            "Opened %s as %s (%d bytes)", acquired.path, audio.container_format.value, len(audio)
        )
        return audio

    def recognize(self, backend: RecognitionBackend, audio: AudioSource) -> SessionOutcome:
        session = RecognitionSession(
            backend,
            audio,
            stream=self._stream,
            queue_size=self.config.queue_size,
        )
        try:
            session.start()
        except TranscriptionError as exc:
            return Failed(exc)
        return session.wait()


def run_transcription(
    request: TranscribeRequest,
    config: AppConfig,
    *,
    stream: TextIO | None = None,
    backend_factory: BackendFactory | None = None,
) -> TranscriptResponse:
    """Transcribe a request and return the transcript, raising the error of a failed run."""
    pipeline = TranscriptionPipeline(
        config,
        backend=request.backend,
        language=request.language,
        stream=stream,
        backend_factory=backend_factory,
    )
    backend = pipeline.create_backend()
    audio = pipeline.open(pipeline.acquire(request.source, request.format))
    outcome = pipeline.recognize(backend, audio)
    if isinstance(outcome, Failed):
        raise outcome.error
    return build_response(outcome, pipeline, audio)


def build_response(
    outcome: Completed,
    pipeline: TranscriptionPipeline,
    audio: AudioSource,
) -> TranscriptResponse:
    return TranscriptResponse(
        utterances=[utterance.rstrip("\n") for utterance in outcome.transcript.utterances],
        text=outcome.transcript.text,
        backend=pipeline.backend_name,
        language=pipeline.language,
        container_format=audio.container_format.value,
    )


class _DownloadDisplay:
    """Status line shown while a remote source downloads."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._renderer: ProgressRenderer | None = None

    def started(self, target: Path) -> None:
        if not is_interactive(self._stream):
            return
        self._stream.write(f"Downloading audio to {target} ... ")
        self._renderer = ProgressRenderer(self._stream)

    def progress(self, fraction: float) -> None:
        if self._renderer is not None:
            self._renderer.report_progress(fraction)

    def dispose(self) -> None:
        if self._renderer is not None:
            self._renderer.dispose()

    def done(self) -> None:
        if self._renderer is not None and is_interactive(self._stream):
            self._stream.write(" ... Done!\n\n")
            self._stream.flush()
