"""
OpenAI-compatible transcription backend.

Works against api.openai.com, Azure OpenAI deployments and any gateway that
speaks the /audio/transcriptions multipart protocol.
"""

import asyncio
import mimetypes
from pathlib import Path
from typing import Dict

import requests

from ...utils.logger import get_logger
from ..errors import APIKeyMissingError, TranscriptionFailedError
from ..interfaces import CredentialStore
from ..providers import TranscriptionProvider
from ..settings import Settings
from ..settings.config import (
    AZURE_HOST_MARKER,
    CREDENTIAL_SERVICE,
    OPENAI_DEFAULT_ENDPOINT,
    OPENAI_DEFAULT_MODEL,
    OPENAI_TRANSCRIPTION_PATH,
)
from .request import ProviderConfig
from .schemas import WhisperResponse

logger = get_logger(__name__)


def resolve_openai_endpoint(base_url: str) -> str:
    custom = (base_url or "").strip()
    if not custom:
        return OPENAI_DEFAULT_ENDPOINT

    # Full endpoints (e.g. Azure deployments with ?api-version=...) are used as-is
    if OPENAI_TRANSCRIPTION_PATH in custom:
        return custom

    base = custom[:-1] if custom.endswith("/") else custom
    return f"{base}/{OPENAI_TRANSCRIPTION_PATH}"


def is_azure_endpoint(base_url: str) -> bool:
    return AZURE_HOST_MARKER in (base_url or "")


def resolve_openai_headers(base_url: str, api_key: str) -> Dict[str, str]:
    if is_azure_endpoint(base_url):
        return {"api-key": api_key}
    return {"Authorization": f"Bearer {api_key}"}


def resolve_openai_model(model: str) -> str:
    name = (model or "").strip()
    return name if name else OPENAI_DEFAULT_MODEL


def resolve_openai_config(settings: Settings, api_key: str) -> ProviderConfig:
    return ProviderConfig(
        endpoint=resolve_openai_endpoint(settings.openai_base_url),
        headers=resolve_openai_headers(settings.openai_base_url, api_key),
        model=resolve_openai_model(settings.openai_model),
    )


class OpenAITranscriber:
    def __init__(self, credentials: CredentialStore):
        self._credentials = credentials

    async def transcribe(self, audio_path: Path, settings: Settings) -> str:
        account = TranscriptionProvider.OPENAI.credential_account
        api_key = self._credentials.get(CREDENTIAL_SERVICE, account)
        if not api_key:
            raise APIKeyMissingError(TranscriptionProvider.OPENAI.display_name)

        config = resolve_openai_config(settings, api_key)
        logger.info(
            f"Uploading {audio_path.name} to {config.endpoint} (model={config.model})"
        )

        try:
            response = await asyncio.to_thread(self._upload, audio_path, config)
        except (requests.RequestException, ValueError, OSError) as e:
            logger.error(f"OpenAI transcription failed: {e}")
            raise TranscriptionFailedError(str(e)) from e

        return response.text

    @staticmethod
    def _upload(audio_path: Path, config: ProviderConfig) -> WhisperResponse:
        mime_type = mimetypes.guess_type(audio_path.name)[0] or "application/octet-stream"
        with open(audio_path, "rb") as f:
            response = requests.post(
                config.endpoint,
                headers=config.headers,
                files={"file": (audio_path.name, f, mime_type)},
                data={"model": config.model},
            )
        response.raise_for_status()
        return WhisperResponse.model_validate(response.json())
