"""Recognition backend routing."""

from __future__ import annotations

import os

from voxscribe.config import AppConfig
from voxscribe.recognition.base import RecognitionBackend
from voxscribe.recognition.backends.simulated import SimulatedBackend

_DEFAULT_SIM_TRANSCRIPT = "hello world"


def resolve_backend(
    name: str,
    config: AppConfig,
    *,
    language: str | None = None,
) -> RecognitionBackend:
    """Build the named backend; missing credentials or runtimes raise ConfigError."""
    resolved_language = language or config.language

    if name == "azure":
        from voxscribe.recognition.backends.azure import AzureSpeechBackend

        return AzureSpeechBackend(
            region=config.speech_region,
            key=config.speech_key,
            language=resolved_language,
        )
    if name == "hf":
        from voxscribe.recognition.backends.hf_pipeline import TransformersBackend

        return TransformersBackend(model_id=config.hf_model_id, language=resolved_language)
    if name == "simulated":
        transcript = os.getenv("VOXSCRIBE_SIM_TRANSCRIPT", _DEFAULT_SIM_TRANSCRIPT)
        return SimulatedBackend.from_transcript(transcript)

    raise ValueError(f"Unknown recognition backend: {name}")
