"""Clipping of interim recognition text to one terminal line."""

from __future__ import annotations

import shutil

# Columns kept free for the leading "... ", the trailing " ..." and the
# cursor cell at the end of the line.
PREVIEW_MARGIN = 9
_ELLIPSIS = "..."


def clip_preview(text: str, width: int) -> str:
    """Fit interim text on one line of `width` columns.

    Text that fits gets a trailing ellipsis to mark it as tentative. Longer
    text keeps its most recent words and is wrapped in ellipses. Terminals
    too narrow for the markers get the tail of the text alone.
    """
    room = width - PREVIEW_MARGIN
    if room < 1:
        return text[-(width - 1):] if width > 1 else ""
    if len(text) > room:
        return f"{_ELLIPSIS} {text[-room:]} {_ELLIPSIS}"
    return text + _ELLIPSIS


def terminal_width(fallback: int = 80) -> int:
    """Return the current terminal width in columns."""
    return shutil.get_terminal_size((fallback, 24)).columns
