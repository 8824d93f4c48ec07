"""
Parakeet backend.

Parakeet runs inside a provisioned Python runtime on Apple Silicon. When
semantic correction is enabled, the correction model is warmed up in
parallel with transcription so it is resident by the time correction runs.
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable

from ...utils.logger import get_logger
from ...utils.platform import is_apple_silicon
from ..errors import ParakeetModelNotReadyError, TranscriptionFailedError
from ..interfaces import LocalParakeetEngine, RuntimeProvisioner, WarmupDaemon
from ..providers import CorrectionMode
from ..settings import Settings
from ..settings.config import WARMUP_DAEMON_KIND

logger = get_logger(__name__)


class WarmupCoordinator:
    """Fork-join of one transcription and one correction-model warmup."""

    def __init__(self, daemon: WarmupDaemon, kind: str = WARMUP_DAEMON_KIND):
        self._daemon = daemon
        self._kind = kind

    async def run(self, transcription: Awaitable[str], model_repo: str) -> str:
        text, warmup = await asyncio.gather(
            transcription,
            self._daemon.warmup(self._kind, model_repo),
            return_exceptions=True,
        )

        if isinstance(warmup, BaseException):
            logger.warning(f"Warmup of {model_repo} failed, continuing without it: {warmup}")

        if isinstance(text, BaseException):
            raise text
        return text


class ParakeetTranscriber:
    def __init__(
        self,
        engine: LocalParakeetEngine,
        provisioner: RuntimeProvisioner,
        warmup_daemon: WarmupDaemon,
        is_supported_platform: Callable[[], bool] = is_apple_silicon,
    ):
        self._engine = engine
        self._provisioner = provisioner
        self._warmup = WarmupCoordinator(warmup_daemon)
        self._is_supported_platform = is_supported_platform

    async def transcribe(self, audio_path: Path, settings: Settings) -> str:
        if not self._is_supported_platform():
            raise TranscriptionFailedError("Parakeet requires an Apple Silicon Mac.")

        try:
            python_path = await self._provisioner.ensure_ready(
                settings.python_path_override, on_log=logger.debug
            )
        except Exception as e:
            logger.error(f"Parakeet runtime setup failed: {e}", exc_info=True)
            raise TranscriptionFailedError(f"Parakeet runtime setup failed: {e}") from e

        should_warmup = settings.semantic_correction_mode != CorrectionMode.OFF

        try:
            transcription = self._engine.transcribe(audio_path, str(python_path))
            if should_warmup:
                logger.info(
                    f"Transcribing {audio_path.name} with Parakeet while warming up "
                    f"{settings.semantic_correction_model_repo}"
                )
                return await self._warmup.run(
                    transcription, settings.semantic_correction_model_repo
                )

            logger.info(f"Transcribing {audio_path.name} with Parakeet")
            return await transcription
        except ParakeetModelNotReadyError:
            raise
        except Exception as e:
            logger.error(f"Parakeet transcription failed: {e}", exc_info=True)
            raise TranscriptionFailedError(f"Parakeet error: {e}") from e
