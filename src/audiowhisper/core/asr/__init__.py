from .backends import SherpaWhisperEngine, SubprocessParakeetEngine
from .gemini_backend import GeminiTranscriber
from .local_whisper import LocalWhisperTranscriber
from .openai_backend import (
    OpenAITranscriber,
    resolve_openai_config,
    resolve_openai_endpoint,
    resolve_openai_headers,
    resolve_openai_model,
)
from .parakeet import ParakeetTranscriber, WarmupCoordinator
from .progress import ProgressNotifier
from .request import ProviderConfig, TranscriptionRequest
from .transcriber import TranscriptionOrchestrator

__all__ = [
    "GeminiTranscriber",
    "LocalWhisperTranscriber",
    "OpenAITranscriber",
    "ParakeetTranscriber",
    "ProgressNotifier",
    "ProviderConfig",
    "SherpaWhisperEngine",
    "SubprocessParakeetEngine",
    "TranscriptionOrchestrator",
    "TranscriptionRequest",
    "WarmupCoordinator",
    "resolve_openai_config",
    "resolve_openai_endpoint",
    "resolve_openai_headers",
    "resolve_openai_model",
]
