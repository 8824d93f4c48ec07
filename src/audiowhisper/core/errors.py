"""Error taxonomy surfaced by the transcription orchestrator."""

from typing import Optional


class SpeechToTextError(Exception):
    """Base exception for every failure the orchestrator reports."""


class InvalidInputError(SpeechToTextError):
    """Raised when an endpoint or audio file is malformed or unusable."""

    def __init__(self, message: str = "Invalid audio file"):
        super().__init__(message)
        self.message = message


class APIKeyMissingError(SpeechToTextError):
    """Raised when no API key is stored for a cloud provider."""

    def __init__(self, provider: str):
        super().__init__(f"{provider} API key is missing. Add it in settings.")
        self.provider = provider


class TranscriptionFailedError(SpeechToTextError):
    """Catch-all for remote, protocol and validation failures."""

    def __init__(self, message: str):
        super().__init__(f"Transcription failed: {message}")
        self.message = message


class LocalTranscriptionFailedError(SpeechToTextError):
    """Wraps an on-device engine failure without losing the original error."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Local transcription failed: {cause}")
        self.cause = cause


class FileTooLargeError(SpeechToTextError):
    """Raised when a file exceeds the inline upload ceiling."""

    def __init__(self, size: Optional[int] = None, limit: Optional[int] = None):
        message = "Audio file is too large for inline transcription"
        if size is not None and limit is not None:
            message = f"{message} ({size} bytes, limit {limit} bytes)"
        super().__init__(message)
        self.size = size
        self.limit = limit


class ParakeetModelNotReadyError(Exception):
    """
    Raised by the Parakeet engine when its model is not downloaded yet.

    Not part of the SpeechToTextError hierarchy: the orchestrator lets it
    through untouched so callers can send the user to model setup.
    """

    def __init__(self, message: str = "Parakeet model is not ready. Download it in settings."):
        super().__init__(message)
        self.message = message


__all__ = [
    "SpeechToTextError",
    "InvalidInputError",
    "APIKeyMissingError",
    "TranscriptionFailedError",
    "LocalTranscriptionFailedError",
    "FileTooLargeError",
    "ParakeetModelNotReadyError",
]
