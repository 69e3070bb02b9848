"""Shared data models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

BackendName = Literal["azure", "hf", "simulated"]


class HealthResponse(BaseModel):
    """Response payload for the API health endpoint."""

    status: Literal["ok"]
    version: str
    env: str


class TranscribeRequest(BaseModel):
    """Transcription request payload used by both CLI and API."""

    source: str = Field(min_length=1)
    format: str | None = None
    backend: BackendName | None = None
    language: str | None = Field(default=None, min_length=2)


class TranscriptResponse(BaseModel):
    """Finalized transcript of a completed recognition session."""

    utterances: list[str]
    text: str
    backend: BackendName
    language: str
    container_format: str


class ErrorResponse(BaseModel):
    """Error payload describing why a session failed."""

    kind: str
    detail: str
    code: str | None = None
