from .llm_processor import (
    CORRECTION_PROMPT,
    LLMCorrectionService,
    LLMProcessor,
    LLMResponse,
)
from .text_cleaner import clean_transcription_text

__all__ = [
    "CORRECTION_PROMPT",
    "LLMCorrectionService",
    "LLMProcessor",
    "LLMResponse",
    "clean_transcription_text",
]
