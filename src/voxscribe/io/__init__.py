"""I/O utilities."""

from voxscribe.io.audio import (
    AudioContainerFormat,
    AudioSink,
    AudioSource,
    resolve_container_format,
)
from voxscribe.io.export import to_json
from voxscribe.io.fetch import AcquiredAudio, acquire_audio, guess_format_hint, is_remote

__all__ = [
    "AcquiredAudio",
    "AudioContainerFormat",
    "AudioSink",
    "AudioSource",
    "acquire_audio",
    "guess_format_hint",
    "is_remote",
    "resolve_container_format",
    "to_json",
]
