"""Recognition events and the backend interface."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

from voxscribe.io.audio import AudioSource


class ResultReason(str, Enum):
    RECOGNIZED_SPEECH = "recognized_speech"
    NO_MATCH = "no_match"


class CancellationReason(str, Enum):
    END_OF_STREAM = "end_of_stream"
    ERROR = "error"
    OTHER = "other"


@dataclass(frozen=True)
class Recognizing:
    """Interim, revisable text for the utterance in progress."""

    text: str


@dataclass(frozen=True)
class Recognized:
    """Final result for one utterance."""

    reason: ResultReason
    text: str


@dataclass(frozen=True)
class Canceled:
    """End of the session, either at end of audio or because of a failure."""

    reason: CancellationReason
    error_code: str | None = None
    error_details: str | None = None


RecognitionEvent = Union[Recognizing, Recognized, Canceled]
EventSink = Callable[[RecognitionEvent], None]


class RecognitionBackend(Protocol):
    """Continuous recognizer that pushes events from its own thread."""

    name: str

    def start(self, source: AudioSource, on_event: EventSink) -> None:
        """Begin recognizing `source`, delivering events to `on_event` in order.

        Must return without waiting for recognition to finish. The last
        event delivered is always a `Canceled`.
        """

    def stop(self) -> None:
        """Release recognizer resources once the session has ended."""
