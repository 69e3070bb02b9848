"""Continuous speech recognition."""

from voxscribe.recognition.base import (
    CancellationReason,
    Canceled,
    EventSink,
    RecognitionBackend,
    RecognitionEvent,
    Recognized,
    Recognizing,
    ResultReason,
)
from voxscribe.recognition.registry import resolve_backend
from voxscribe.recognition.session import (
    Completed,
    Failed,
    RecognitionSession,
    SessionOutcome,
    SessionState,
    Transcript,
)

__all__ = [
    "CancellationReason",
    "Canceled",
    "Completed",
    "EventSink",
    "Failed",
    "RecognitionBackend",
    "RecognitionEvent",
    "RecognitionSession",
    "Recognized",
    "Recognizing",
    "ResultReason",
    "SessionOutcome",
    "SessionState",
    "Transcript",
    "resolve_backend",
]
