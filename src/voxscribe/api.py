"""HTTP API for voxscribe."""

from __future__ import annotations

import io

from fastapi import FastAPI, HTTPException

from voxscribe import __version__
from voxscribe.config import load_config
from voxscribe.core import run_transcription
from voxscribe.errors import (
    AudioIOError,
    BackendError,
    ConfigError,
    NoAudioError,
    TranscriptionError,
    UnexpectedTermination,
    UsageError,
)
from voxscribe.models import ErrorResponse, HealthResponse, TranscribeRequest, TranscriptResponse

_STATUS_BY_ERROR: dict[type[TranscriptionError], int] = {
    UsageError: 422,
    NoAudioError: 422,
    AudioIOError: 404,
    ConfigError: 503,
    BackendError: 502,
    UnexpectedTermination: 502,
}


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="voxscribe",
        version=__version__,
        description="Speech transcription service API.",
    )
    config = load_config()

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__, env=config.env)

    @app.post("/v1/transcribe", response_model=TranscriptResponse, tags=["transcription"])
    def transcribe(request: TranscribeRequest) -> TranscriptResponse:
        try:
            # the terminal preview has no reader here
            return run_transcription(request, config, stream=io.StringIO())
        except TranscriptionError as exc:
            raise HTTPException(
                status_code=_STATUS_BY_ERROR.get(type(exc), 500),
                detail=_error_payload(exc).model_dump(),
            ) from exc

    return app


def _error_payload(error: TranscriptionError) -> ErrorResponse:
    code = error.code if isinstance(error, BackendError) else None
    return ErrorResponse(kind=error.kind, detail=error.detail, code=code)


app = create_app()
