"""
Gemini transcription backend.

Small recordings are sent inline as base64 inside the generateContent body.
Large recordings are first registered through the Files API and then
referenced by URI.
"""

import asyncio
import base64
import json
import os
from pathlib import Path
from typing import Dict

import requests

from ...utils.logger import get_logger
from ..errors import (
    APIKeyMissingError,
    FileTooLargeError,
    InvalidInputError,
    TranscriptionFailedError,
)
from ..interfaces import CredentialStore
from ..providers import TranscriptionProvider
from ..settings import Settings
from ..settings.config import (
    CREDENTIAL_SERVICE,
    GEMINI_AUDIO_MIME_TYPE,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    GEMINI_FILES_API_THRESHOLD_BYTES,
    GEMINI_INLINE_MAX_BYTES,
    GEMINI_TRANSCRIBE_PROMPT,
    GEMINI_UPLOAD_DISPLAY_NAME,
)
from .schemas import (
    GeminiFileData,
    GeminiFileResponse,
    GeminiInlineData,
    GeminiRequest,
    GeminiRequestPart,
    GeminiResponse,
)

logger = get_logger(__name__)


def resolve_gemini_base_url(base_url: str) -> str:
    custom = (base_url or "").strip()
    if not custom:
        return GEMINI_DEFAULT_BASE_URL
    return custom[:-1] if custom.endswith("/") else custom


def resolve_gemini_model(model: str) -> str:
    name = (model or "").strip()
    return name if name else GEMINI_DEFAULT_MODEL


def gemini_generate_url(settings: Settings) -> str:
    base = resolve_gemini_base_url(settings.gemini_base_url)
    return f"{base}/v1beta/models/{resolve_gemini_model(settings.gemini_model)}:generateContent"


def gemini_upload_url(settings: Settings) -> str:
    return f"{resolve_gemini_base_url(settings.gemini_base_url)}/upload/v1beta/files"


class GeminiTranscriber:
    def __init__(self, credentials: CredentialStore):
        self._credentials = credentials

    async def transcribe(self, audio_path: Path, settings: Settings) -> str:
        account = TranscriptionProvider.GEMINI.credential_account
        api_key = self._credentials.get(CREDENTIAL_SERVICE, account)
        if not api_key:
            raise APIKeyMissingError(TranscriptionProvider.GEMINI.display_name)

        file_size = self._file_size(audio_path)

        if file_size > GEMINI_FILES_API_THRESHOLD_BYTES:
            logger.info(f"Using Gemini Files API for {audio_path.name} ({file_size} bytes)")
            return await self.transcribe_with_files_api(audio_path, api_key, settings)

        logger.info(f"Using inline Gemini request for {audio_path.name} ({file_size} bytes)")
        return await self.transcribe_inline(audio_path, api_key, settings)

    async def transcribe_with_files_api(
        self, audio_path: Path, api_key: str, settings: Settings
    ) -> str:
        # The uploaded file is left on the server; Gemini expires it after 48h.
        try:
            uploaded = await asyncio.to_thread(
                self._upload_file, audio_path, api_key, gemini_upload_url(settings)
            )
        except (requests.RequestException, ValueError, OSError) as e:
            logger.error(f"Gemini file upload failed: {e}")
            raise TranscriptionFailedError(f"File upload failed: {e}") from e

        logger.debug(f"Uploaded {audio_path.name} as {uploaded.file.name}")

        part = GeminiRequestPart(
            file_data=GeminiFileData(
                mime_type=GEMINI_AUDIO_MIME_TYPE, file_uri=uploaded.file.uri
            )
        )
        request = GeminiRequest.for_audio(part, GEMINI_TRANSCRIBE_PROMPT)
        return await self._generate(request, api_key, settings)

    async def transcribe_inline(
        self, audio_path: Path, api_key: str, settings: Settings
    ) -> str:
        # Stricter than the routing threshold: 5-10 MiB files are rejected here
        file_size = self._file_size(audio_path)
        if file_size > GEMINI_INLINE_MAX_BYTES:
            raise FileTooLargeError(file_size, GEMINI_INLINE_MAX_BYTES)

        try:
            audio_bytes = await asyncio.to_thread(audio_path.read_bytes)
        except OSError as e:
            raise InvalidInputError(f"Could not read {audio_path}: {e}") from e

        part = GeminiRequestPart(
            inline_data=GeminiInlineData(
                mime_type=GEMINI_AUDIO_MIME_TYPE,
                data=base64.b64encode(audio_bytes).decode("ascii"),
            )
        )
        request = GeminiRequest.for_audio(part, GEMINI_TRANSCRIBE_PROMPT)
        return await self._generate(request, api_key, settings)

    async def _generate(
        self, request: GeminiRequest, api_key: str, settings: Settings
    ) -> str:
        url = gemini_generate_url(settings)
        try:
            response = await asyncio.to_thread(
                self._post_json, url, request.to_payload(), api_key
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini generateContent failed: {e}")
            raise TranscriptionFailedError(str(e)) from e

        text = response.first_text()
        if text is None:
            raise TranscriptionFailedError("No text in response")
        return text

    @staticmethod
    def _headers(api_key: str) -> Dict[str, str]:
        return {"X-Goog-Api-Key": api_key}

    @staticmethod
    def _file_size(audio_path: Path) -> int:
        try:
            return os.path.getsize(audio_path)
        except OSError as e:
            raise InvalidInputError(f"Could not read {audio_path}: {e}") from e

    @classmethod
    def _upload_file(cls, audio_path: Path, api_key: str, url: str) -> GeminiFileResponse:
        metadata = json.dumps({"file": {"display_name": GEMINI_UPLOAD_DISPLAY_NAME}})
        with open(audio_path, "rb") as f:
            response = requests.post(
                url,
                headers=cls._headers(api_key),
                files={
                    "metadata": (None, metadata, "application/json"),
                    "file": (audio_path.name, f, GEMINI_AUDIO_MIME_TYPE),
                },
            )
        response.raise_for_status()
        return GeminiFileResponse.model_validate(response.json())

    @classmethod
    def _post_json(cls, url: str, payload: dict, api_key: str) -> GeminiResponse:
        response = requests.post(url, headers=cls._headers(api_key), json=payload)
        response.raise_for_status()
        return GeminiResponse.model_validate(response.json())
