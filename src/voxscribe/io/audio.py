"""Format-tagged audio sources pushed into recognition backends."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol

from voxscribe.errors import AudioIOError, InvalidState


class AudioContainerFormat(str, Enum):
    """Container the recognition backend must decode the byte stream as."""

    ANY = "any"
    ALAW = "alaw"
    AMRNB = "amrnb"
    AMRWB = "amrwb"
    FLAC = "flac"
    MP3 = "mp3"
    OGG_OPUS = "ogg"
    MULAW = "mulaw"


_FORMAT_TOKENS = {fmt.value: fmt for fmt in AudioContainerFormat}


def resolve_container_format(hint: str | None) -> AudioContainerFormat:
    """Map a format token to a container format.

    Tokens are matched exactly and case-sensitively; anything unrecognised,
    including an empty or missing hint, resolves to ANY.
    """
    if not hint:
        return AudioContainerFormat.ANY
    return _FORMAT_TOKENS.get(hint, AudioContainerFormat.ANY)


class AudioSink(Protocol):
    """Push-stream side of a recognition backend."""

    def write(self, data: bytes) -> None:
        """Append audio bytes."""

    def close(self) -> None:
        """Signal end of audio."""


class AudioSource:
    """A fully buffered audio file and its container format.

    The whole buffer is pushed into a sink once and the sink is then closed,
    which is the end-of-audio signal for the backend.
    """

    def __init__(self, data: bytes, container_format: AudioContainerFormat) -> None:
        self._data = data
        self._container_format = container_format
        self._closed = False

    @classmethod
    def open(cls, path: str | Path, format_hint: str | None = None) -> AudioSource:
        """Read `path` completely and tag it with the resolved format."""
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise AudioIOError(f"cannot read audio from {path}: {exc}") from exc
        return cls(data, resolve_container_format(format_hint))

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def container_format(self) -> AudioContainerFormat:
        return self._container_format

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._data)

    def push_to(self, sink: AudioSink) -> None:
        """Write every byte to `sink`, then close it."""
        if self._closed:
            raise InvalidState("audio source was already pushed and closed")
        self._closed = True
        sink.write(self._data)
        sink.close()
