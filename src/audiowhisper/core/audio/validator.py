import asyncio
import os
from pathlib import Path

from ...utils.logger import get_logger
from ..interfaces import AudioValidator, ValidationResult
from ..settings.config import MAX_AUDIO_FILE_BYTES, SUPPORTED_AUDIO_EXTENSIONS

logger = get_logger(__name__)


class AudioFileValidator(AudioValidator):
    """Cheap file-level checks run before any backend is contacted."""

    def __init__(
        self,
        max_bytes: int = MAX_AUDIO_FILE_BYTES,
        extensions: set = SUPPORTED_AUDIO_EXTENSIONS,
    ):
        self._max_bytes = max_bytes
        self._extensions = {ext.lower() for ext in extensions}

    async def validate(self, path: Path) -> ValidationResult:
        return await asyncio.to_thread(self._validate_sync, Path(path))

    def _validate_sync(self, path: Path) -> ValidationResult:
        if not path.exists():
            return ValidationResult.invalid(f"Audio file not found: {path}")
        if not path.is_file():
            return ValidationResult.invalid(f"Audio path is not a file: {path}")

        if path.suffix.lower() not in self._extensions:
            return ValidationResult.invalid(
                f"Unsupported audio format '{path.suffix or path.name}'"
            )

        try:
            size = os.path.getsize(path)
        except OSError as e:
            return ValidationResult.invalid(f"Could not read audio file: {e}")

        if size == 0:
            return ValidationResult.invalid("Audio file is empty")
        if size > self._max_bytes:
            return ValidationResult.invalid(
                f"Audio file is too large ({size / 1024 / 1024:.1f} MB, "
                f"limit {self._max_bytes / 1024 / 1024:.0f} MB)"
            )

        logger.debug(f"Validated {path.name}: {size} bytes")
        return ValidationResult.ok(size_bytes=size)
