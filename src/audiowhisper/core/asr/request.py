from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from ..providers import TranscriptionProvider


@dataclass(frozen=True)
class TranscriptionRequest:
    """
    One transcription call.

    Attributes:
        audio_path: Recording to transcribe
        provider: Backend to dispatch to
        model: Local Whisper model id; required for LOCAL, ignored otherwise
        correct: Whether to run semantic correction on the result
    """
    audio_path: Path
    provider: TranscriptionProvider
    model: Optional[str] = None
    correct: bool = True

    @property
    def whisper_model(self) -> Optional[str]:
        if self.provider != TranscriptionProvider.LOCAL:
            return None
        return self.model


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved endpoint, auth headers and model for one cloud call."""
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    model: str = ""
