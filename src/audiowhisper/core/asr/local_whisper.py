from pathlib import Path
from typing import Optional

from ...utils.logger import get_logger
from ..errors import InvalidInputError, LocalTranscriptionFailedError
from ..interfaces import LocalWhisperEngine
from .progress import ProgressNotifier

logger = get_logger(__name__)


class LocalWhisperTranscriber:
    """Runs an on-device Whisper model and republishes its progress."""

    def __init__(
        self,
        engine: LocalWhisperEngine,
        notifier: Optional[ProgressNotifier] = None,
    ):
        self._engine = engine
        self._notifier = notifier or ProgressNotifier()

    @property
    def notifier(self) -> ProgressNotifier:
        return self._notifier

    async def transcribe(self, audio_path: Path, model: str) -> str:
        if not self._engine.supports(audio_path):
            supported = ", ".join(sorted(self._engine.supported_extensions or ()))
            raise InvalidInputError(
                f"Local Whisper cannot read '{audio_path.suffix or audio_path.name}' files "
                f"(supported: {supported})"
            )

        logger.info(f"Local Whisper transcription of {audio_path.name} with '{model}'")
        try:
            return await self._engine.transcribe(
                audio_path, model, on_progress=self._notifier.publish
            )
        except Exception as e:
            logger.error(f"Local Whisper engine failed: {e}", exc_info=True)
            raise LocalTranscriptionFailedError(e) from e
