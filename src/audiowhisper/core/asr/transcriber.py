"""
Transcription orchestrator.

Validates a recording, dispatches it to one of the four backends,
normalizes the text and optionally runs semantic correction. Every failure
leaves as a SpeechToTextError, except ParakeetModelNotReadyError which is
passed through so callers can send the user to model setup.
"""

import time
from pathlib import Path
from typing import Callable, Optional, Union

from ...utils.logger import get_logger
from ...utils.platform import is_apple_silicon
from ..errors import (
    ParakeetModelNotReadyError,
    SpeechToTextError,
    TranscriptionFailedError,
)
from ..interfaces import (
    AudioValidator,
    CorrectionService,
    CredentialStore,
    LocalParakeetEngine,
    LocalWhisperEngine,
    RuntimeProvisioner,
    WarmupDaemon,
)
from ..providers import TranscriptionProvider
from ..settings import Settings
from ..transcript_processor.text_cleaner import clean_transcription_text
from .gemini_backend import GeminiTranscriber
from .local_whisper import LocalWhisperTranscriber
from .openai_backend import OpenAITranscriber
from .parakeet import ParakeetTranscriber
from .progress import ProgressNotifier
from .request import TranscriptionRequest

logger = get_logger(__name__)

PathLike = Union[str, Path]


class TranscriptionOrchestrator:
    """
    Single entry point for turning a recording into text.

    Example:
        orchestrator = TranscriptionOrchestrator(
            validator=AudioFileValidator(),
            credentials=EnvironmentCredentialStore(),
            correction=LLMCorrectionService(settings),
            whisper_engine=SherpaWhisperEngine(),
            parakeet_engine=SubprocessParakeetEngine(),
            provisioner=UvRuntimeProvisioner(),
            warmup_daemon=daemon,
        )
        text = await orchestrator.transcribe(path, TranscriptionProvider.OPENAI, settings)
    """

    def __init__(
        self,
        validator: AudioValidator,
        credentials: CredentialStore,
        correction: CorrectionService,
        whisper_engine: LocalWhisperEngine,
        parakeet_engine: LocalParakeetEngine,
        provisioner: RuntimeProvisioner,
        warmup_daemon: WarmupDaemon,
        notifier: Optional[ProgressNotifier] = None,
        is_supported_platform: Callable[[], bool] = is_apple_silicon,
    ):
        self._validator = validator
        self._correction = correction
        self._notifier = notifier or ProgressNotifier()

        self._openai = OpenAITranscriber(credentials)
        self._gemini = GeminiTranscriber(credentials)
        self._local = LocalWhisperTranscriber(whisper_engine, self._notifier)
        self._parakeet = ParakeetTranscriber(
            parakeet_engine,
            provisioner,
            warmup_daemon,
            is_supported_platform=is_supported_platform,
        )

    @property
    def notifier(self) -> ProgressNotifier:
        return self._notifier

    async def transcribe_raw(
        self,
        audio_path: PathLike,
        provider: TranscriptionProvider,
        settings: Settings,
        model: Optional[str] = None,
    ) -> str:
        """
        Transcribe without semantic correction.

        Args:
            audio_path: Recording to transcribe
            provider: Backend to use
            settings: Preference snapshot for this call
            model: Local Whisper model id (required for LOCAL, ignored otherwise)

        Returns:
            The normalized transcript.

        Raises:
            SpeechToTextError: Any validation, backend or protocol failure
            ParakeetModelNotReadyError: Parakeet model not downloaded yet
        """
        path = Path(audio_path)
        start_time = time.time()

        await self._validate(path)
        raw_text = await self._dispatch(path, provider, settings, model)
        text = clean_transcription_text(raw_text)

        logger.info(
            f"{provider.display_name} transcription finished in "
            f"{time.time() - start_time:.2f}s ({len(text)} chars)"
        )
        return text

    async def transcribe(
        self,
        audio_path: PathLike,
        provider: TranscriptionProvider,
        settings: Settings,
        model: Optional[str] = None,
    ) -> str:
        """Transcribe, normalize and run semantic correction."""
        text = await self.transcribe_raw(audio_path, provider, settings, model)
        return await self._correct(text, provider, settings)

    async def transcribe_with_preferences(
        self, audio_path: PathLike, settings: Settings
    ) -> str:
        """Use the provider (and Whisper model) stored in settings; always corrects."""
        provider = settings.transcription_provider
        model = (
            settings.selected_whisper_model
            if provider == TranscriptionProvider.LOCAL
            else None
        )
        return await self.transcribe(audio_path, provider, settings, model)

    async def execute(self, request: TranscriptionRequest, settings: Settings) -> str:
        if request.correct:
            return await self.transcribe(
                request.audio_path, request.provider, settings, request.whisper_model
            )
        return await self.transcribe_raw(
            request.audio_path, request.provider, settings, request.whisper_model
        )

    async def _validate(self, path: Path) -> None:
        try:
            result = await self._validator.validate(path)
        except Exception as e:
            logger.error(f"Audio validation crashed for {path}: {e}", exc_info=True)
            raise TranscriptionFailedError(str(e)) from e

        if not result.valid:
            reason = result.reason or "Invalid audio file"
            logger.warning(f"Rejected {path.name}: {reason}")
            raise TranscriptionFailedError(reason)

    async def _dispatch(
        self,
        path: Path,
        provider: TranscriptionProvider,
        settings: Settings,
        model: Optional[str],
    ) -> str:
        try:
            if provider == TranscriptionProvider.OPENAI:
                return await self._openai.transcribe(path, settings)
            if provider == TranscriptionProvider.GEMINI:
                return await self._gemini.transcribe(path, settings)
            if provider == TranscriptionProvider.LOCAL:
                if not model:
                    raise TranscriptionFailedError(
                        "Whisper model required for local transcription"
                    )
                return await self._local.transcribe(path, model)
            if provider == TranscriptionProvider.PARAKEET:
                return await self._parakeet.transcribe(path, settings)
        except (SpeechToTextError, ParakeetModelNotReadyError):
            raise
        except Exception as e:
            logger.error(f"{provider.display_name} backend failed: {e}", exc_info=True)
            raise TranscriptionFailedError(str(e)) from e

        raise TranscriptionFailedError(f"Unsupported provider: {provider!r}")

    async def _correct(
        self, text: str, provider: TranscriptionProvider, settings: Settings
    ) -> str:
        try:
            return await self._correction.correct(text, provider, settings)
        except Exception as e:
            logger.error(f"Semantic correction failed: {e}", exc_info=True)
            raise TranscriptionFailedError(f"Correction failed: {e}") from e
