"""
Collaborator interfaces consumed by the transcription core.

The orchestrator only depends on these abstractions:
- AudioValidator: checks a recording before any backend sees it
- CredentialStore: API key lookup by (service, account)
- CorrectionService: post-processing text transform
- LocalWhisperEngine / LocalParakeetEngine: on-device speech models
- RuntimeProvisioner: prepares the Python runtime used by Parakeet
- WarmupDaemon: preloads the correction model

Concrete implementations live next to the code that owns each concern and
can be swapped in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, FrozenSet, Optional

from .providers import TranscriptionProvider

if TYPE_CHECKING:
    from .settings import Settings

ProgressCallback = Callable[[float], None]
LogCallback = Callable[[str], None]


@dataclass(frozen=True)
class ValidationResult:
    """
    Verdict returned by an AudioValidator.

    Attributes:
        valid: Whether the file can be transcribed
        reason: Human readable explanation when invalid
        size_bytes: File size observed during validation, if known
    """
    valid: bool
    reason: Optional[str] = None
    size_bytes: Optional[int] = None

    @classmethod
    def ok(cls, size_bytes: Optional[int] = None) -> "ValidationResult":
        return cls(valid=True, size_bytes=size_bytes)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason)


class AudioValidator(ABC):
    @abstractmethod
    async def validate(self, path: Path) -> ValidationResult:
        """Check that the file at ``path`` is a usable recording."""
        pass


class CredentialStore(ABC):
    @abstractmethod
    def get(self, service: str, account: str) -> Optional[str]:
        """
        Look up a secret.

        Synchronous, unlike the other collaborators: adapters read the key
        before their first await.

        Args:
            service: Application namespace the secret was stored under
            account: Provider account name, e.g. "OpenAI"

        Returns:
            The secret, or None when nothing is stored.
        """
        pass


class CorrectionService(ABC):
    @abstractmethod
    async def correct(
        self,
        text: str,
        provider: TranscriptionProvider,
        settings: Optional["Settings"] = None,
    ) -> str:
        """
        Post-process a normalized transcript.

        Args:
            text: Normalized transcript
            provider: Backend that produced the text
            settings: Preference snapshot of the current call; implementations
                fall back to their own snapshot when omitted

        Returns:
            The corrected text (or ``text`` unchanged).
        """
        pass


class LocalWhisperEngine(ABC):
    #: Lower-case file suffixes the engine can decode; None means any format
    supported_extensions: Optional[FrozenSet[str]] = None

    def supports(self, path: Path) -> bool:
        if self.supported_extensions is None:
            return True
        return Path(path).suffix.lower() in self.supported_extensions

    @abstractmethod
    async def transcribe(
        self,
        path: Path,
        model: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Transcribe a file with an on-device Whisper model.

        Args:
            path: Audio file to transcribe
            model: Local Whisper model identifier
            on_progress: Optional callback for progress (0.0-1.0)

        Raises:
            Exception: Any engine failure; the adapter wraps it.
        """
        pass


class LocalParakeetEngine(ABC):
    @abstractmethod
    async def transcribe(self, path: Path, python_path: str) -> str:
        """
        Transcribe a file with Parakeet inside the provisioned runtime.

        Raises:
            ParakeetModelNotReadyError: If the model has not been downloaded.
        """
        pass


class RuntimeProvisioner(ABC):
    @abstractmethod
    async def ensure_ready(
        self,
        python_override: Optional[str] = None,
        on_log: Optional[LogCallback] = None,
    ) -> Path:
        """
        Make sure the local inference runtime exists.

        Idempotent; may be slow the first time.

        Returns:
            Path to the runtime's Python interpreter.
        """
        pass


class WarmupDaemon(ABC):
    @abstractmethod
    async def warmup(self, kind: str, model_repo: str) -> None:
        """Preload ``model_repo`` into the daemon of the given kind."""
        pass
