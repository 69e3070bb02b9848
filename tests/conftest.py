import io
from pathlib import Path

import pytest

_ENV_VARS = (
    "VOXSCRIBE_ENV",
    "VOXSCRIBE_LOG_LEVEL",
    "VOXSCRIBE_API_HOST",
    "VOXSCRIBE_API_PORT",
    "VOXSCRIBE_WORKERS",
    "VOXSCRIBE_BACKEND",
    "VOXSCRIBE_LANGUAGE",
    "VOXSCRIBE_HF_MODEL_ID",
    "VOXSCRIBE_DOWNLOAD_DIR",
    "VOXSCRIBE_QUEUE_SIZE",
    "VOXSCRIBE_SIM_TRANSCRIPT",
    "AZURE_AI_SPEECH_REGION",
    "AZURE_AI_SPEECH_KEY",
)


class TtyStream(io.StringIO):
    """In-memory stream that claims to be a terminal while `interactive` is set."""

    def __init__(self, interactive: bool = True) -> None:
        super().__init__()
        self.interactive = interactive

    def isatty(self) -> bool:
        return self.interactive


def render_line(output: str) -> str:
    """Replay cursor save/restore sequences onto a single line and return it."""
    line: list[str] = []
    cursor = 0
    saved = 0
    index = 0
    while index < len(output):
        if output.startswith("\x1b7", index):
            saved = cursor
            index += 2
            continue
        if output.startswith("\x1b8", index):
            cursor = saved
            index += 2
            continue
        char = output[index]
        if char == "\n":
            line = []
            cursor = 0
        else:
            if cursor < len(line):
                line[cursor] = char
            else:
                line.extend(" " * (cursor - len(line)))
                line.append(char)
            cursor += 1
        index += 1
    return "".join(line)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("VOXSCRIBE_LOG_LEVEL", "WARNING")


@pytest.fixture
def tty() -> TtyStream:
    return TtyStream()


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "talk.flac"
    path.write_bytes(b"fLaC\x00\x00\x00\x22" + b"\x00" * 64)
    return path
