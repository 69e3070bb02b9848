"""Continuous recognition session.

Backends push events from their own threads. The session only enqueues
them there; `wait` drains the queue on the caller's thread and folds each
event into the transcript, so the transcript and the terminal line have a
single writer and events are handled in arrival order. Events delivered
synchronously on the thread that called `start` are folded in place, since
nothing drains the queue until `start` returns.
"""

from __future__ import annotations

import logging
import queue
import sys
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import TextIO, Union

from voxscribe.console import ProgressRenderer, clip_preview, is_interactive, terminal_width
from voxscribe.errors import (
    BackendError,
    InvalidState,
    TranscriptionError,
    UnexpectedTermination,
)
from voxscribe.io.audio import AudioSource
from voxscribe.recognition.base import (
    CancellationReason,
    Canceled,
    RecognitionBackend,
    RecognitionEvent,
    Recognized,
    Recognizing,
    ResultReason,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELED_ERROR = "canceled_error"
    CANCELED_UNEXPECTED = "canceled_unexpected"


@dataclass(frozen=True)
class Transcript:
    """Finalized utterances in the order they were recognized."""

    utterances: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "".join(self.utterances)

    def appended(self, utterance: str) -> Transcript:
        return Transcript(self.utterances + (utterance,))

    def __len__(self) -> int:
        return len(self.utterances)


@dataclass(frozen=True)
class Completed:
    transcript: Transcript


@dataclass(frozen=True)
class Failed:
    error: TranscriptionError


SessionOutcome = Union[Completed, Failed]


def fold_recognized(transcript: Transcript, event: Recognized) -> Transcript:
    """Return `transcript` with the event's text appended when it is a usable final result."""
    if event.reason is not ResultReason.RECOGNIZED_SPEECH or not event.text:
        return transcript
    return transcript.appended(event.text + "\n")


class RecognitionSession:
    """Run one backend over one audio source until it cancels.

    Usage:
        session = RecognitionSession(backend, source)
        session.start()
        outcome = session.wait()
    """

    def __init__(
        self,
        backend: RecognitionBackend,
        source: AudioSource,
        *,
        stream: TextIO | None = None,
        queue_size: int = 256,
        width: Callable[[], int] = terminal_width,
    ) -> None:
        self._backend = backend
        self._source = source
        self._stream = stream if stream is not None else sys.stdout
        self._width = width
        self._events: queue.Queue[RecognitionEvent] = queue.Queue(maxsize=queue_size)
        self._finished: Future[SessionOutcome] = Future()
        self._state = SessionState.IDLE
        self._transcript = Transcript()
        self._preview: ProgressRenderer | None = None
        self._owner: int | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def finished(self) -> Future[SessionOutcome]:
        """Resolved exactly once, when the session reaches a terminal state."""
        return self._finished

    def start(self) -> None:
        """Subscribe to the backend and begin continuous recognition."""
        if self._state is not SessionState.IDLE:
            raise InvalidState(f"session already started (state={self._state.value})")
        self._state = SessionState.RUNNING
        self._owner = threading.get_ident()
        logger.debug(
            "Starting %s recognition on %d bytes (%s)",
            self._backend.name,
            len(self._source),
            self._source.container_format.value,
        )
        try:
            self._backend.start(self._source, self._enqueue)
        except TranscriptionError as exc:
            self._terminate(SessionState.CANCELED_ERROR, Failed(exc))
            raise

    def wait(self) -> SessionOutcome:
        """Fold queued events until the session terminates, then return its outcome."""
        if self._state is SessionState.IDLE:
            raise InvalidState("session was never started")
        try:
            while not self._finished.done():
                self.handle(self._events.get())
        finally:
            self._backend.stop()
        return self._finished.result()

    def run(self) -> SessionOutcome:
        self.start()
        return self.wait()

    def handle(self, event: RecognitionEvent) -> None:
        """Apply one event. Events after termination are dropped."""
        if self._finished.done():
            logger.debug("Dropping %s received after session end", type(event).__name__)
            return
        if isinstance(event, Recognizing):
            self._on_recognizing(event)
        elif isinstance(event, Recognized):
            self._on_recognized(event)
        elif isinstance(event, Canceled):
            self._on_canceled(event)
        else:
            raise InvalidState(f"unknown recognition event {event!r}")

    def _enqueue(self, event: RecognitionEvent) -> None:
        if self._finished.done():
            logger.debug("Dropping %s delivered after session end", type(event).__name__)
            return
        if threading.get_ident() == self._owner:
            self.handle(event)
            return
        self._events.put(event)

    def _on_recognizing(self, event: Recognizing) -> None:
        if not event.text or not is_interactive(self._stream):
            return
        if self._preview is None:
            self._preview = ProgressRenderer(self._stream)
        self._preview.report(clip_preview(event.text, self._width()))

    def _on_recognized(self, event: Recognized) -> None:
        updated = fold_recognized(self._transcript, event)
        if updated is self._transcript:
            logger.debug("Ignoring %s result with %d chars", event.reason.value, len(event.text))
            return
        self._transcript = updated
        self._clear_preview()
        self._stream.write(event.text + "\n")
        self._stream.flush()

    def _on_canceled(self, event: Canceled) -> None:
        self._clear_preview()
        if event.reason is CancellationReason.END_OF_STREAM:
            logger.debug("Recognition reached end of stream (%d utterances)", len(self._transcript))
            self._terminate(SessionState.COMPLETED, Completed(self._transcript))
        elif event.reason is CancellationReason.ERROR:
            error = BackendError(event.error_code or "unknown", event.error_details or "")
            logger.debug("Recognition canceled: %s", error)
            self._terminate(SessionState.CANCELED_ERROR, Failed(error))
        else:
            self._terminate(
                SessionState.CANCELED_UNEXPECTED,
                Failed(UnexpectedTermination(event.reason.value)),
            )

    def _terminate(self, state: SessionState, outcome: SessionOutcome) -> None:
        self._state = state
        if isinstance(outcome, Failed):
            # a canceled session returns no partial transcript
            self._transcript = Transcript()
        self._finished.set_result(outcome)

    def _clear_preview(self) -> None:
        if self._preview is not None:
            self._preview.dispose()
            self._preview = None
