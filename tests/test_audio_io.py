from pathlib import Path

import pytest

from voxscribe.errors import AudioIOError, InvalidState
from voxscribe.io import AudioContainerFormat, AudioSource, resolve_container_format


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[tuple[str, bytes]] = []

    def write(self, data: bytes) -> None:
        self.calls.append(("write", data))

    def close(self) -> None:
        self.calls.append(("close", b""))


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        ("any", AudioContainerFormat.ANY),
        ("alaw", AudioContainerFormat.ALAW),
        ("amrnb", AudioContainerFormat.AMRNB),
        ("amrwb", AudioContainerFormat.AMRWB),
        ("flac", AudioContainerFormat.FLAC),
        ("mp3", AudioContainerFormat.MP3),
        ("ogg", AudioContainerFormat.OGG_OPUS),
        ("mulaw", AudioContainerFormat.MULAW),
    ],
)
def test_known_tokens_resolve(hint: str, expected: AudioContainerFormat) -> None:
    assert resolve_container_format(hint) is expected


@pytest.mark.parametrize("hint", ["xyz", "", None, "FLAC", " mp3", "ogg-opus", "wav"])
def test_unknown_tokens_resolve_to_any(hint: str | None) -> None:
    assert resolve_container_format(hint) is AudioContainerFormat.ANY


def test_open_reads_whole_file_and_tags_format(audio_file: Path) -> None:
    source = AudioSource.open(audio_file, "flac")

    assert source.container_format is AudioContainerFormat.FLAC
    assert source.data == audio_file.read_bytes()
    assert len(source) == audio_file.stat().st_size
    assert not source.closed


def test_open_without_hint_is_any(audio_file: Path) -> None:
    assert AudioSource.open(audio_file).container_format is AudioContainerFormat.ANY


def test_open_missing_file_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(AudioIOError, match="cannot read audio"):
        AudioSource.open(tmp_path / "missing.mp3", "mp3")


def test_push_writes_everything_then_closes(audio_file: Path) -> None:
    source = AudioSource.open(audio_file, "flac")
    sink = RecordingSink()

    source.push_to(sink)

    assert sink.calls == [("write", audio_file.read_bytes()), ("close", b"")]
    assert source.closed


def test_push_twice_is_invalid(audio_file: Path) -> None:
    source = AudioSource.open(audio_file)
    source.push_to(RecordingSink())

    with pytest.raises(InvalidState):
        source.push_to(RecordingSink())
