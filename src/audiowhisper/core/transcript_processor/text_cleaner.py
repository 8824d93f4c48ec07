"""Transcript text normalization."""

import re

from ...utils.logger import get_logger

logger = get_logger(__name__)

# Innermost groups only: no nested delimiter of the same kind inside the match
_BRACKETED = re.compile(r"\[[^\[\]]*\]")
_PARENTHESIZED = re.compile(r"\([^()]*\)")
_WHITESPACE = re.compile(r"\s+")


def _remove_until_stable(text: str, pattern: re.Pattern) -> str:
    while True:
        text, count = pattern.subn("", text)
        if count == 0:
            return text


def clean_transcription_text(text: str) -> str:
    """
    Remove non-speech markers and tidy whitespace.

    Bracketed markers ("[music]", "[BLANK_AUDIO]") are stripped first, then
    parenthetical ones ("(laughs)"). Each kind is removed one innermost layer
    per pass until nothing changes, so nested groups disappear entirely.
    Whitespace is trimmed and runs collapse to a single space.

    Args:
        text: Raw transcript from a backend

    Returns:
        The cleaned transcript. Cleaning it again returns it unchanged.
    """
    cleaned = _remove_until_stable(text, _BRACKETED)
    cleaned = _remove_until_stable(cleaned, _PARENTHESIZED)
    cleaned = _WHITESPACE.sub(" ", cleaned.strip())

    if cleaned != text:
        logger.debug(f"Cleaned transcript: {len(text)} -> {len(cleaned)} chars")

    return cleaned
