"""Recognition backend implementations."""

from voxscribe.recognition.backends.simulated import SimulatedBackend, script_utterances

__all__ = ["SimulatedBackend", "script_utterances"]
