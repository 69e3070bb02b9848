"""Audio acquisition from local paths and HTTP(S) URLs."""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from voxscribe.errors import AudioIOError, NoAudioError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_TIMEOUT_SEC = 30.0
_AUDIO_CONTENT_PREFIXES = ("audio/", "video/")
_GENERIC_CONTENT_TYPES = {"application/octet-stream", "binary/octet-stream", ""}

# Suffixes and content types that name a container token directly.
_SUFFIX_FORMATS = {
    ".flac": "flac",
    ".mp3": "mp3",
    ".ogg": "ogg",
    ".opus": "ogg",
    ".amr": "amrnb",
    ".awb": "amrwb",
    ".alaw": "alaw",
    ".ulaw": "mulaw",
    ".mulaw": "mulaw",
}
_CONTENT_TYPE_FORMATS = {
    "audio/flac": "flac",
    "audio/x-flac": "flac",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/ogg": "ogg",
    "audio/opus": "ogg",
    "audio/amr": "amrnb",
    "audio/amr-wb": "amrwb",
    "audio/pcma": "alaw",
    "audio/pcmu": "mulaw",
    "audio/basic": "mulaw",
}

ProgressCallback = Callable[[float], None]
StartCallback = Callable[[Path], None]


@dataclass(frozen=True)
class AcquiredAudio:
    """A local audio file ready to be opened as an AudioSource."""

    path: Path
    format_hint: str | None
    downloaded: bool


def is_remote(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def acquire_audio(
    source: str,
    *,
    download_dir: str | Path,
    format_hint: str | None = None,
    progress: ProgressCallback | None = None,
    on_start: StartCallback | None = None,
    session: requests.Session | None = None,
) -> AcquiredAudio:
    """Resolve `source` to a complete local file.

    Local paths are used in place. URLs are streamed into `download_dir`,
    reporting the completed fraction through `progress` whenever the server
    announces a length.
    """
    if is_remote(source):
        return _download(
            source,
            download_dir=Path(download_dir),
            format_hint=format_hint,
            progress=progress,
            on_start=on_start,
            session=session,
        )

    path = Path(source)
    if not path.is_file():
        raise AudioIOError(f"audio file not found: {source}")
    if path.stat().st_size == 0:
        raise NoAudioError(f"audio file is empty: {source}")
    return AcquiredAudio(
        path=path,
        format_hint=format_hint or guess_format_hint(path.name),
        downloaded=False,
    )


def guess_format_hint(name: str, content_type: str | None = None) -> str | None:
    """Derive a container token from a file name or content type."""
    suffix = Path(name).suffix.casefold()
    if suffix in _SUFFIX_FORMATS:
        return _SUFFIX_FORMATS[suffix]
    if content_type:
        return _CONTENT_TYPE_FORMATS.get(_bare_content_type(content_type))
    return None


def _download(
    url: str,
    *,
    download_dir: Path,
    format_hint: str | None,
    progress: ProgressCallback | None,
    on_start: StartCallback | None,
    session: requests.Session | None,
) -> AcquiredAudio:
    if session is not None:
        return _stream_to_file(url, session, download_dir, format_hint, progress, on_start)
    with requests.Session() as http:
        return _stream_to_file(url, http, download_dir, format_hint, progress, on_start)


def _stream_to_file(
    url: str,
    http: requests.Session,
    download_dir: Path,
    format_hint: str | None,
    progress: ProgressCallback | None,
    on_start: StartCallback | None,
) -> AcquiredAudio:
    try:
        response = http.get(url, stream=True, timeout=_TIMEOUT_SEC)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise AudioIOError(f"cannot download {url}: {exc}") from exc

    with response:
        content_type = _bare_content_type(response.headers.get("Content-Type", ""))
        if not (
            content_type.startswith(_AUDIO_CONTENT_PREFIXES)
            or content_type in _GENERIC_CONTENT_TYPES
        ):
            raise NoAudioError(f"{url} has no audio stream (content type {content_type})")

        target = download_dir / _file_name(url, content_type)
        target.parent.mkdir(parents=True, exist_ok=True)
        total = _content_length(response)
        logger.debug("Downloading %s (%s bytes) to %s", url, total, target)
        if on_start is not None:
            on_start(target)

        received = 0
        try:
            with target.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if not chunk:
                        continue
                    handle.write(chunk)
                    received += len(chunk)
                    if progress is not None and total:
                        progress(min(1.0, received / total))
        except (OSError, requests.RequestException) as exc:
            target.unlink(missing_ok=True)
            raise AudioIOError(f"download of {url} failed: {exc}") from exc

    if received == 0:
        target.unlink(missing_ok=True)
        raise NoAudioError(f"{url} returned no audio data")

    return AcquiredAudio(
        path=target,
        format_hint=format_hint or guess_format_hint(target.name, content_type),
        downloaded=True,
    )


def _file_name(url: str, content_type: str) -> str:
    name = Path(unquote(urlparse(url).path)).name or "audio"
    if not Path(name).suffix:
        extension = mimetypes.guess_extension(content_type) if content_type else None
        name += extension or ".bin"
    return name


def _content_length(response: requests.Response) -> int | None:
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        length = int(raw)
    except ValueError:
        return None
    return length if length > 0 else None


def _bare_content_type(value: str) -> str:
    return value.split(";", 1)[0].strip().casefold()
