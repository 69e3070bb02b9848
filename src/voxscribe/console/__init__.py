"""Terminal rendering helpers."""

from voxscribe.console.preview import PREVIEW_MARGIN, clip_preview, terminal_width
from voxscribe.console.progress import ProgressRenderer, is_interactive

__all__ = [
    "PREVIEW_MARGIN",
    "ProgressRenderer",
    "clip_preview",
    "is_interactive",
    "terminal_width",
]
