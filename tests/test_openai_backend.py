"""Tests for the OpenAI-compatible transcription backend."""

import asyncio
from unittest.mock import patch

import pytest
import requests

from audiowhisper.core.asr.openai_backend import (
    OpenAITranscriber,
    is_azure_endpoint,
    resolve_openai_config,
    resolve_openai_endpoint,
    resolve_openai_headers,
    resolve_openai_model,
)
from audiowhisper.core.errors import APIKeyMissingError, TranscriptionFailedError
from audiowhisper.core.settings import Settings

POST = "audiowhisper.core.asr.openai_backend.requests.post"


class TestEndpointResolution:
    def test_empty_uses_default(self):
        assert (
            resolve_openai_endpoint("")
            == "https://api.openai.com/v1/audio/transcriptions"
        )

    def test_full_endpoint_used_verbatim(self):
        url = (
            "https://foo.openai.azure.com/openai/deployments/whisper/"
            "audio/transcriptions?api-version=2024-02-01"
        )
        assert resolve_openai_endpoint(url) == url

    def test_base_url_gets_path_appended(self):
        assert (
            resolve_openai_endpoint("https://gateway.example.com/v1")
            == "https://gateway.example.com/v1/audio/transcriptions"
        )

    def test_trailing_slash_stripped_before_append(self):
        assert (
            resolve_openai_endpoint("https://gateway.example.com/v1/")
            == "https://gateway.example.com/v1/audio/transcriptions"
        )


class TestAuthResolution:
    def test_azure_uses_api_key_header(self):
        base = "https://foo.openai.azure.com/openai/deployments/whisper"
        assert is_azure_endpoint(base)
        assert resolve_openai_headers(base, "secret") == {"api-key": "secret"}

    def test_other_hosts_use_bearer(self):
        assert resolve_openai_headers("", "secret") == {"Authorization": "Bearer secret"}
        assert resolve_openai_headers(
            "https://gateway.example.com/v1", "secret"
        ) == {"Authorization": "Bearer secret"}


class TestModelResolution:
    def test_blank_model_falls_back_to_default(self):
        assert resolve_openai_model("   ") == "whisper-1"
        assert resolve_openai_model("") == "whisper-1"

    def test_configured_model_is_trimmed(self):
        assert resolve_openai_model("  gpt-4o-transcribe \n") == "gpt-4o-transcribe"

    def test_resolve_config_combines_all_parts(self):
        settings = Settings(
            openai_base_url="https://proxy.example.com/",
            openai_model="gpt-4o-mini-transcribe",
        )
        config = resolve_openai_config(settings, "k")
        assert config.endpoint == "https://proxy.example.com/audio/transcriptions"
        assert config.headers == {"Authorization": "Bearer k"}
        assert config.model == "gpt-4o-mini-transcribe"


class TestOpenAITranscriber:
    def test_missing_key_raises_before_any_request(self, settings, make_audio, empty_credentials):
        transcriber = OpenAITranscriber(empty_credentials)
        with patch(POST) as mock_post:
            with pytest.raises(APIKeyMissingError) as exc_info:
                asyncio.run(transcriber.transcribe(make_audio(), settings))
        assert exc_info.value.provider == "OpenAI"
        mock_post.assert_not_called()

    def test_uploads_multipart_and_returns_text(
        self, settings, make_audio, credentials, http_response
    ):
        audio = make_audio(2048, name="memo.m4a")
        transcriber = OpenAITranscriber(credentials)

        with patch(POST, return_value=http_response({"text": "hello world"})) as mock_post:
            text = asyncio.run(transcriber.transcribe(audio, settings))

        assert text == "hello world"
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.openai.com/v1/audio/transcriptions"
        assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}
        assert kwargs["data"] == {"model": "whisper-1"}
        assert kwargs["files"]["file"][0] == "memo.m4a"

    def test_transport_error_maps_to_transcription_failed(
        self, settings, make_audio, credentials
    ):
        transcriber = OpenAITranscriber(credentials)
        with patch(POST, side_effect=requests.ConnectionError("connection refused")):
            with pytest.raises(TranscriptionFailedError) as exc_info:
                asyncio.run(transcriber.transcribe(make_audio(), settings))
        assert "connection refused" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_http_error_status_maps_to_transcription_failed(
        self, settings, make_audio, credentials, http_response
    ):
        response = http_response({"error": {"message": "bad key"}}, status_code=401)
        response.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")
        transcriber = OpenAITranscriber(credentials)

        with patch(POST, return_value=response):
            with pytest.raises(TranscriptionFailedError, match="401"):
                asyncio.run(transcriber.transcribe(make_audio(), settings))

    def test_response_without_text_maps_to_transcription_failed(
        self, settings, make_audio, credentials, http_response
    ):
        transcriber = OpenAITranscriber(credentials)
        with patch(POST, return_value=http_response({"unexpected": True})):
            with pytest.raises(TranscriptionFailedError):
                asyncio.run(transcriber.transcribe(make_audio(), settings))
