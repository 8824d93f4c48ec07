"""
Centralized application configuration.

Edit the variables below to configure development settings.
"""

import logging

# =============================================================================
# DEVELOPMENT SETTINGS - Edit these for local development
# =============================================================================
LOG_LEVEL = "DEBUG"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_TO_CONSOLE = True  # Set to True to output logs to terminal
# =============================================================================

# =============================================================================
# CREDENTIALS
# =============================================================================
CREDENTIAL_SERVICE = "AudioWhisper"  # Service name used for API key lookups
# =============================================================================

# =============================================================================
# OPENAI-COMPATIBLE TRANSCRIPTION
# =============================================================================
OPENAI_DEFAULT_ENDPOINT = "https://api.openai.com/v1/audio/transcriptions"
OPENAI_TRANSCRIPTION_PATH = "audio/transcriptions"
OPENAI_DEFAULT_MODEL = "whisper-1"
AZURE_HOST_MARKER = ".openai.azure.com"
# =============================================================================

# =============================================================================
# GEMINI TRANSCRIPTION
# =============================================================================
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash-lite"
GEMINI_AUDIO_MIME_TYPE = "audio/mp4"
GEMINI_UPLOAD_DISPLAY_NAME = "audio_recording"
GEMINI_TRANSCRIBE_PROMPT = (
    "Transcribe this audio to text. "
    "Return only the transcription without any additional text."
)
# Files above this size go through the Files API instead of inline data
GEMINI_FILES_API_THRESHOLD_BYTES = 10 * 1024 * 1024
# Hard ceiling for inline (base64) requests
GEMINI_INLINE_MAX_BYTES = 5 * 1024 * 1024
# =============================================================================

# =============================================================================
# LOCAL ENGINES
# =============================================================================
DEFAULT_CORRECTION_MODEL_REPO = "mlx-community/Qwen3-1.7B-4bit"
WARMUP_DAEMON_KIND = "mlx"
PARAKEET_PACKAGES = ["parakeet-mlx", "numpy"]
MAX_AUDIO_FILE_BYTES = 25 * 1024 * 1024
SUPPORTED_AUDIO_EXTENSIONS = {".m4a", ".mp3", ".mp4", ".wav", ".aac", ".flac", ".ogg", ".webm"}
# =============================================================================


def get_log_level() -> int:
    """Get the logging level as an integer."""
    return getattr(logging, LOG_LEVEL.upper(), logging.INFO)
