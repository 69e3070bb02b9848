"""Transcription orchestration."""

from voxscribe.core.pipeline import TranscriptionPipeline, build_response, run_transcription

__all__ = ["TranscriptionPipeline", "build_response", "run_transcription"]
