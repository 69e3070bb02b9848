"""Error taxonomy shared by the pipeline, CLI and API."""

from __future__ import annotations


class TranscriptionError(Exception):
    """Base error; `exit_code` is the process status the CLI returns for it."""

    kind = "error"
    exit_code = 1

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class UsageError(TranscriptionError):
    """Raised for a malformed command-line invocation."""

    kind = "usage"
    exit_code = 1


class ConfigError(TranscriptionError):
    """Raised when the recognition backend is missing credentials or its runtime."""

    kind = "config"
    exit_code = 2


class NoAudioError(TranscriptionError):
    """Raised when the acquired source has no usable audio stream."""

    kind = "no_audio"
    exit_code = 3


class BackendError(TranscriptionError):
    """Raised when the recognition service cancels a session with an error."""

    kind = "backend"
    exit_code = 4

    def __init__(self, code: str, details: str) -> None:
        super().__init__(f"recognition canceled with error {code}: {details}")
        self.code = code
        self.details = details


class UnexpectedTermination(TranscriptionError):
    """Raised when a session is canceled for a reason other than end-of-stream or error."""

    kind = "unexpected"
    exit_code = 5

    def __init__(self, reason: str) -> None:
        super().__init__(f"recognition canceled unexpectedly ({reason})")
        self.reason = reason


class AudioIOError(TranscriptionError):
    """Raised when the audio byte source cannot be fully read."""

    kind = "io"
    exit_code = 6


class InvalidState(TranscriptionError):
    """Raised on programmer misuse, e.g. starting a session twice."""

    kind = "invalid_state"
    exit_code = 70
