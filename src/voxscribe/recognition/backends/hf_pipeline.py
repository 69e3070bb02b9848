"""Hugging Face transformers ASR backend."""

from __future__ import annotations

import logging
import os
import threading
from typing import Any

from voxscribe.errors import ConfigError
from voxscribe.io.audio import AudioSource
from voxscribe.recognition.base import (
    CancellationReason,
    Canceled,
    EventSink,
    Recognized,
    Recognizing,
    ResultReason,
)

logger = logging.getLogger(__name__)

_CHUNK_LENGTH_SEC = 30
_HF_PIPELINE_CACHE: dict[str, Any] = {}


class _BufferSink:
    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    def write(self, data: bytes) -> None:
        self.chunks.append(data)

    def close(self) -> None:
        pass


class TransformersBackend:
    """Decode the buffered audio with a `transformers` ASR pipeline.

    The pipeline works on the whole buffer in fixed windows; every window
    becomes one utterance. Interim events replay each window word by word
    so the terminal preview behaves as with a streaming service.
    """

    name = "hf"

    def __init__(self, *, model_id: str, language: str | None) -> None:
        try:
            import torch
            from transformers import pipeline  # type: ignore[import-not-found]
        except ModuleNotFoundError as exc:
            raise ConfigError(
                "The hf backend requires torch and transformers. Install the `hf` extra."
            ) from exc
        self._torch = torch
        self._pipeline_factory = pipeline
        self._model_id = model_id
        self._language = _normalize_language_code(language)
        self._thread: threading.Thread | None = None

    def start(self, source: AudioSource, on_event: EventSink) -> None:
        sink = _BufferSink()
        source.push_to(sink)
        self._thread = threading.Thread(
            target=self._recognize,
            args=(b"".join(sink.chunks), on_event),
            name="hf-recognizer",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _recognize(self, audio: bytes, on_event: EventSink) -> None:
        try:
            pipe = self._load_pipeline()
            kwargs: dict[str, Any] = {
                "chunk_length_s": _CHUNK_LENGTH_SEC,
                "return_timestamps": True,
            }
            if self._language is not None:
                kwargs["generate_kwargs"] = {"language": self._language}
            result = pipe(audio, **kwargs)
        except Exception as exc:  # model download, ffmpeg decode or inference failure
            logger.debug("transformers recognition failed", exc_info=True)
            on_event(
                Canceled(
                    CancellationReason.ERROR,
                    error_code=type(exc).__name__,
                    error_details=str(exc),
                )
            )
            return

        for text in _chunk_texts(result):
            words = text.split()
            for count in range(1, len(words)):
                on_event(Recognizing(" ".join(words[:count])))
            reason = ResultReason.RECOGNIZED_SPEECH if words else ResultReason.NO_MATCH
            on_event(Recognized(reason, " ".join(words)))
        on_event(Canceled(CancellationReason.END_OF_STREAM))

    def _load_pipeline(self) -> Any:
        device = _resolve_pipeline_device(
            torch=self._torch,
            preference=os.getenv("VOXSCRIBE_HF_DEVICE", "auto"),
        )
        cache_key = f"{self._model_id}@{device}"
        pipe = _HF_PIPELINE_CACHE.get(cache_key)
        if pipe is None:
            logger.info("Loading ASR model %s on device %s", self._model_id, device)
            pipe = self._pipeline_factory(
                "automatic-speech-recognition",
                model=self._model_id,
                device=device,
            )
            _HF_PIPELINE_CACHE[cache_key] = pipe
        return pipe


def _chunk_texts(result: Any) -> list[str]:
    if not isinstance(result, dict):
        return []
    chunks = result.get("chunks")
    if isinstance(chunks, list) and chunks:
        return [str(chunk.get("text", "")).strip() for chunk in chunks if isinstance(chunk, dict)]
    text = str(result.get("text", "")).strip()
    return [text] if text else []


def _resolve_pipeline_device(torch: Any, preference: str) -> int:
    pref = preference.casefold()
    if pref == "cpu":
        return -1
    if pref == "cuda":
        return 0 if torch.cuda.is_available() else -1
    if torch.cuda.is_available():
        return 0
    return -1


def _normalize_language_code(language_code: str | None) -> str | None:
    if language_code is None:
        return None
    cleaned = language_code.strip().casefold().replace("_", "-")
    if not cleaned:
        return None
    return cleaned.split("-")[0]
