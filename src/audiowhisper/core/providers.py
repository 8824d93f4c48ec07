from enum import Enum
from typing import Optional


class TranscriptionProvider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    LOCAL = "local"
    PARAKEET = "parakeet"

    @property
    def display_name(self) -> str:
        return {
            TranscriptionProvider.OPENAI: "OpenAI",
            TranscriptionProvider.GEMINI: "Gemini",
            TranscriptionProvider.LOCAL: "Local Whisper",
            TranscriptionProvider.PARAKEET: "Parakeet",
        }[self]

    @property
    def credential_account(self) -> Optional[str]:
        """Account name the API key is stored under, None for on-device engines."""
        return {
            TranscriptionProvider.OPENAI: "OpenAI",
            TranscriptionProvider.GEMINI: "Gemini",
        }.get(self)

    @property
    def is_local(self) -> bool:
        return self in (TranscriptionProvider.LOCAL, TranscriptionProvider.PARAKEET)


class CorrectionMode(str, Enum):
    OFF = "off"
    LOCAL_MLX = "localMLX"
    CLOUD = "cloud"

    @property
    def display_name(self) -> str:
        return {
            CorrectionMode.OFF: "Off",
            CorrectionMode.LOCAL_MLX: "Local (MLX)",
            CorrectionMode.CLOUD: "Cloud",
        }[self]
