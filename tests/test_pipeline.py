from dataclasses import replace
from pathlib import Path

import pytest
from conftest import TtyStream

from voxscribe.config import AppConfig, load_config
from voxscribe.core import TranscriptionPipeline, run_transcription
from voxscribe.errors import (
    AudioIOError,
    BackendError,
    ConfigError,
    NoAudioError,
    UnexpectedTermination,
)
from voxscribe.io import AudioSource
from voxscribe.models import TranscribeRequest
from voxscribe.recognition import (
    CancellationReason,
    Canceled,
    Completed,
    EventSink,
    Failed,
    Recognized,
    ResultReason,
)
from voxscribe.recognition.backends import SimulatedBackend


class ScriptedBackend:
    name = "simulated"

    def __init__(self, *events: object) -> None:
        self._events = events
        self.started = False

    def start(self, source: AudioSource, on_event: EventSink) -> None:
        self.started = True
        self.source = source
        source.push_to(_NullSink())
        for event in self._events:
            on_event(event)  # type: ignore[arg-type]

    def stop(self) -> None:
        pass


class _NullSink:
    def write(self, data: bytes) -> None:
        pass

    def close(self) -> None:
        pass


def _config(tmp_path: Path) -> AppConfig:
    return replace(load_config(config_dir=tmp_path), download_dir=str(tmp_path))


def _factory(backend: ScriptedBackend):
    def build(name: str, config: AppConfig, *, language: str | None = None) -> ScriptedBackend:
        return backend

    return build


def test_pipeline_completes(audio_file: Path, tmp_path: Path) -> None:
    backend = ScriptedBackend(
        Recognized(ResultReason.RECOGNIZED_SPEECH, "hello world"),
        Canceled(CancellationReason.END_OF_STREAM),
    )
    stream = TtyStream(interactive=False)
    pipeline = TranscriptionPipeline(_config(tmp_path), stream=stream, backend_factory=_factory(backend))

    outcome = pipeline.run(str(audio_file))

    assert isinstance(outcome, Completed)
    assert outcome.transcript.text == "hello world\n"
    assert backend.source.container_format.value == "flac"
    assert stream.getvalue() == "hello world\n"


def test_format_override(audio_file: Path, tmp_path: Path) -> None:
    backend = ScriptedBackend(Canceled(CancellationReason.END_OF_STREAM))
    pipeline = TranscriptionPipeline(
        _config(tmp_path), stream=TtyStream(False), backend_factory=_factory(backend)
    )

    pipeline.run(str(audio_file), format_hint="xyz")

    assert backend.source.container_format.value == "any"


def test_missing_audio_short_circuits(tmp_path: Path) -> None:
    backend = ScriptedBackend()
    pipeline = TranscriptionPipeline(
        _config(tmp_path), stream=TtyStream(False), backend_factory=_factory(backend)
    )

    outcome = pipeline.run(str(tmp_path / "missing.mp3"))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, AudioIOError)
    assert not backend.started


def test_empty_audio_short_circuits(tmp_path: Path) -> None:
    empty = tmp_path / "empty.ogg"
    empty.write_bytes(b"")
    backend = ScriptedBackend()
    pipeline = TranscriptionPipeline(
        _config(tmp_path), stream=TtyStream(False), backend_factory=_factory(backend)
    )

    outcome = pipeline.run(str(empty))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, NoAudioError)
    assert not backend.started


def test_missing_credentials_fail_before_acquisition(tmp_path: Path) -> None:
    pipeline = TranscriptionPipeline(_config(tmp_path), backend="azure", stream=TtyStream(False))

    outcome = pipeline.run(str(tmp_path / "missing.mp3"))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, ConfigError)


def test_backend_error_becomes_failed_outcome(audio_file: Path, tmp_path: Path) -> None:
    backend = ScriptedBackend(
        Recognized(ResultReason.RECOGNIZED_SPEECH, "partial"),
        Canceled(CancellationReason.ERROR, error_code="AuthenticationFailure", error_details="401"),
    )
    pipeline = TranscriptionPipeline(
        _config(tmp_path), stream=TtyStream(False), backend_factory=_factory(backend)
    )

    outcome = pipeline.run(str(audio_file))

    assert isinstance(outcome, Failed)
    assert isinstance(outcome.error, BackendError)
    assert outcome.error.code == "AuthenticationFailure"


def test_run_transcription_builds_response(audio_file: Path, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("VOXSCRIBE_SIM_TRANSCRIPT", "good morning|see you")

    response = run_transcription(
        TranscribeRequest(source=str(audio_file), backend="simulated", language="en-GB"),
        _config(tmp_path),
        stream=TtyStream(False),
    )

    assert response.utterances == ["good morning", "see you"]
    assert response.text == "good morning\nsee you\n"
    assert response.backend == "simulated"
    assert response.language == "en-GB"
    assert response.container_format == "flac"


def test_run_transcription_raises_failure(audio_file: Path, tmp_path: Path) -> None:
    backend = ScriptedBackend(Canceled(CancellationReason.OTHER))

    with pytest.raises(UnexpectedTermination):
        run_transcription(
            TranscribeRequest(source=str(audio_file)),
            _config(tmp_path),
            stream=TtyStream(False),
            backend_factory=_factory(backend),
        )


def test_simulated_backend_end_to_end(audio_file: Path, tmp_path: Path) -> None:
    pipeline = TranscriptionPipeline(
        _config(tmp_path),
        stream=TtyStream(False),
        backend_factory=lambda name, config, language=None: SimulatedBackend.from_transcript("a b c"),
    )

    outcome = pipeline.run(str(audio_file))

    assert isinstance(outcome, Completed)
    assert outcome.transcript.utterances == ("a b c\n",)
