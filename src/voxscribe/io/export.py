"""Transcript serializers."""

from __future__ import annotations

from voxscribe.models import TranscriptResponse


def to_json(response: TranscriptResponse) -> str:
    """Serialize a transcript response to formatted JSON."""
    return response.model_dump_json(indent=2)
