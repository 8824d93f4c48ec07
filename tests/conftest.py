"""
Shared fixtures for transcription tests.

HTTP is mocked at requests.post; on-device engines and collaborators are
AsyncMock stand-ins, so no test touches the network or a real model.
"""
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from audiowhisper.core.interfaces import ValidationResult
from audiowhisper.core.settings import EnvironmentCredentialStore, Settings


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def make_audio(tmp_path):
    """Create a recording of the given size (sparse, so large sizes are cheap)."""

    def _make(size: int = 1024, name: str = "recording.m4a") -> Path:
        path = tmp_path / name
        with open(path, "wb") as f:
            f.truncate(size)
        return path

    return _make


@pytest.fixture
def credentials():
    return EnvironmentCredentialStore(
        {
            ("AudioWhisper", "OpenAI"): "sk-test",
            ("AudioWhisper", "Gemini"): "gm-test",
        }
    )


@pytest.fixture
def empty_credentials(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return EnvironmentCredentialStore()


@pytest.fixture
def valid_validator():
    validator = MagicMock()
    validator.validate = AsyncMock(return_value=ValidationResult.ok())
    return validator


@pytest.fixture
def http_response():
    """Build a fake requests.Response carrying a JSON payload."""

    def _build(payload: dict, status_code: int = 200) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    return _build
