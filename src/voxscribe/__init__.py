"""Live speech transcription for remote and local audio."""

__version__ = "0.1.0"

__all__ = ["__version__"]
