"""Command line runtime."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from audiowhisper import __app_name__, __version__
from audiowhisper.core.asr import (
    SherpaWhisperEngine,
    SubprocessParakeetEngine,
    TranscriptionOrchestrator,
    TranscriptionRequest,
)
from audiowhisper.core.audio import AudioFileValidator
from audiowhisper.core.deps import UvRuntimeProvisioner
from audiowhisper.core.errors import ParakeetModelNotReadyError, SpeechToTextError
from audiowhisper.core.interfaces import CredentialStore, WarmupDaemon
from audiowhisper.core.providers import TranscriptionProvider
from audiowhisper.core.settings import EnvironmentCredentialStore, Settings, get_settings
from audiowhisper.core.transcript_processor import LLMCorrectionService
from audiowhisper.utils.logger import get_logger

logger = get_logger(__name__)

EXIT_FAILURE = 1
EXIT_MODEL_NOT_READY = 2


class _NoResidentDaemon(WarmupDaemon):
    """One-shot CLI runs keep no correction model resident, so there is nothing to warm."""

    async def warmup(self, kind: str, model_repo: str) -> None:
        logger.debug(f"No resident {kind} daemon; skipping warmup of {model_repo}")


def build_orchestrator(
    settings: Settings,
    credentials: Optional[CredentialStore] = None,
    warmup_daemon: Optional[WarmupDaemon] = None,
) -> TranscriptionOrchestrator:
    credentials = credentials or EnvironmentCredentialStore()
    return TranscriptionOrchestrator(
        validator=AudioFileValidator(),
        credentials=credentials,
        correction=LLMCorrectionService(settings, credentials),
        whisper_engine=SherpaWhisperEngine(),
        parakeet_engine=SubprocessParakeetEngine(),
        provisioner=UvRuntimeProvisioner(),
        warmup_daemon=warmup_daemon or _NoResidentDaemon(),
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="audiowhisper",
        description=f"{__app_name__}: transcribe a recorded audio file.",
    )
    parser.add_argument("audio", type=Path, help="Path to the recording")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in TranscriptionProvider],
        default=None,
        help="Backend to use (defaults to the saved preference)",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Local Whisper model id (required for --provider local)",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Skip semantic correction",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def run_from_args(args: argparse.Namespace, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    provider = (
        TranscriptionProvider(args.provider)
        if args.provider
        else settings.transcription_provider
    )
    model = args.model
    if model is None and provider == TranscriptionProvider.LOCAL:
        model = settings.selected_whisper_model

    request = TranscriptionRequest(
        audio_path=args.audio,
        provider=provider,
        model=model,
        correct=not args.raw,
    )
    orchestrator = build_orchestrator(settings)
    return asyncio.run(orchestrator.execute(request, settings))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        text = run_from_args(args)
    except ParakeetModelNotReadyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_MODEL_NOT_READY
    except SpeechToTextError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
