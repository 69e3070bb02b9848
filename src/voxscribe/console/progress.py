"""Single-line, self-erasing terminal status writer."""

from __future__ import annotations

import sys
from types import TracebackType
from typing import TextIO

_SAVE_CURSOR = "\x1b7"
_RESTORE_CURSOR = "\x1b8"


def is_interactive(stream: TextIO) -> bool:
    """Return whether `stream` is attached to a terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False


class ProgressRenderer:
    """Redraw one line of status text in place.

    The cursor position at construction time is the anchor. Each `report`
    blanks exactly as many characters as the previous write before writing
    the new text, so shorter text never leaves a tail of the longer one.
    `dispose` blanks the last text and leaves the cursor at the anchor.

    When the stream is not a terminal every call is a no-op. That check is
    made on every write, because the destination can change under us.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._anchored = False
        self._last_length = 0
        self._anchor()

    @property
    def last_length(self) -> int:
        return self._last_length

    def report(self, text: str) -> None:
        """Replace the displayed status with `text`."""
        if not is_interactive(self._stream):
            return
        self._anchor()
        self._erase_last()
        self._stream.write(text)
        self._stream.flush()
        self._last_length = len(text)

    def report_progress(self, fraction: float) -> None:
        """Display a completion fraction as a percentage with one decimal."""
        self.report(f"{fraction:.1%}")

    def dispose(self) -> None:
        """Blank the displayed status and restore the cursor to the anchor."""
        if not is_interactive(self._stream):
            return
        self._erase_last()
        self._stream.flush()
        self._last_length = 0

    def __enter__(self) -> ProgressRenderer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def _anchor(self) -> None:
        if self._anchored or not is_interactive(self._stream):
            return
        self._stream.write(_SAVE_CURSOR)
        self._anchored = True

    def _erase_last(self) -> None:
        if not self._anchored:
            # nothing saved with ESC 7, so there is nothing to restore to
            return
        if self._last_length > 0:
            self._stream.write(_RESTORE_CURSOR)
            self._stream.write(" " * self._last_length)
        self._stream.write(_RESTORE_CURSOR)
