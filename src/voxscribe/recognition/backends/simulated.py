"""Deterministic backend that replays configured utterances."""

from __future__ import annotations

import threading
from collections.abc import Sequence

from voxscribe.io.audio import AudioSource
from voxscribe.recognition.base import (
    CancellationReason,
    Canceled,
    EventSink,
    RecognitionEvent,
    Recognized,
    Recognizing,
    ResultReason,
)


def script_utterances(utterances: Sequence[str]) -> list[RecognitionEvent]:
    """Build the event stream a live recognizer would emit for `utterances`.

    Each utterance grows word by word through interim events before its
    final result; the stream ends at end-of-stream.
    """
    events: list[RecognitionEvent] = []
    for utterance in utterances:
        words = utterance.split()
        for count in range(1, len(words)):
            events.append(Recognizing(" ".join(words[:count])))
        events.append(Recognized(ResultReason.RECOGNIZED_SPEECH, " ".join(words)))
    events.append(Canceled(CancellationReason.END_OF_STREAM))
    return events


class SimulatedBackend:
    """Emit a fixed event script from a worker thread.

    An empty audio source produces a NO_MATCH result instead of the script,
    mirroring what a real recognizer reports for silence.
    """

    name = "simulated"

    def __init__(self, events: Sequence[RecognitionEvent]) -> None:
        self._events = list(events)
        self._thread: threading.Thread | None = None

    @classmethod
    def from_transcript(cls, transcript: str) -> SimulatedBackend:
        utterances = [part.strip() for part in transcript.split("|") if part.strip()]
        return cls(script_utterances(utterances))

    def start(self, source: AudioSource, on_event: EventSink) -> None:
        source.push_to(_DiscardSink())
        if len(source) == 0:
            events: list[RecognitionEvent] = [
                Recognized(ResultReason.NO_MATCH, ""),
                Canceled(CancellationReason.END_OF_STREAM),
            ]
        else:
            events = self._events
        self._thread = threading.Thread(
            target=_replay, args=(events, on_event), name="simulated-recognizer", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None


class _DiscardSink:
    def write(self, data: bytes) -> None:
        pass

    def close(self) -> None:
        pass


def _replay(events: Sequence[RecognitionEvent], on_event: EventSink) -> None:
    for event in events:
        on_event(event)
