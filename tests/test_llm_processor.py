"""
Tests for LLM processor and the semantic correction service.

litellm is patched at the module level, so no request leaves the process.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from audiowhisper.core.providers import CorrectionMode, TranscriptionProvider
from audiowhisper.core.settings import EnvironmentCredentialStore, Settings
from audiowhisper.core.transcript_processor.llm_processor import (
    CORRECTION_PROMPT,
    LLMCorrectionService,
    LLMProcessor,
    LLMResponse,
)

COMPLETION = "audiowhisper.core.transcript_processor.llm_processor.completion"
COMPLETION_COST = "audiowhisper.core.transcript_processor.llm_processor.completion_cost"


def _completion_response(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage = None
    return response


class TestFormatModelName:
    """Tests for litellm model name prefixing."""

    def test_gemini_model_gets_prefix_for_gemini_provider(self):
        assert (
            LLMProcessor.format_model_name("gemini-2.5-flash", TranscriptionProvider.GEMINI)
            == "gemini/gemini-2.5-flash"
        )

    def test_prefixed_model_is_untouched(self):
        assert (
            LLMProcessor.format_model_name("openrouter/x/y", TranscriptionProvider.GEMINI)
            == "openrouter/x/y"
        )

    def test_openai_model_is_untouched(self):
        assert (
            LLMProcessor.format_model_name("gpt-4o-mini", TranscriptionProvider.OPENAI)
            == "gpt-4o-mini"
        )


class TestLLMProcessor:
    """Tests for LLMProcessor class."""

    def test_initialization(self):
        """Test processor initialization."""
        processor = LLMProcessor(model="gpt-4o-mini", api_key="test-key")
        assert processor.model == "gpt-4o-mini"
        assert processor.api_key == "test-key"

    def test_initialization_defaults(self):
        processor = LLMProcessor()
        assert processor.model == "gpt-4o-mini"
        assert processor.api_key is None
        assert processor.api_base is None

    @patch(COMPLETION_COST, return_value=0.0001)
    @patch(COMPLETION)
    def test_process_calls_completion(self, mock_completion, _mock_cost):
        """Test that process calls litellm completion and returns LLMResponse."""
        mock_completion.return_value = _completion_response("  Fixed text \n")

        processor = LLMProcessor(model="gpt-4o-mini", api_key="test-key")
        result = processor.process("Original text", "Fix the text")

        assert isinstance(result, LLMResponse)
        assert result.content == "Fixed text"
        assert result.cost_usd == 0.0001
        call_args = mock_completion.call_args
        assert call_args.kwargs["model"] == "gpt-4o-mini"
        assert call_args.kwargs["api_key"] == "test-key"
        assert "api_base" not in call_args.kwargs
        assert call_args.kwargs["messages"] == [
            {"role": "system", "content": "Fix the text"},
            {"role": "user", "content": "Original text"},
        ]

    @patch(COMPLETION)
    def test_process_returns_original_on_error(self, mock_completion):
        """Test that process returns original text in LLMResponse on error."""
        mock_completion.side_effect = Exception("API error")

        result = LLMProcessor(api_key="test-key").process("Original text", "Fix")

        assert result.content == "Original text"
        assert result.cost_usd is None

    @patch(COMPLETION)
    def test_process_keeps_original_on_empty_content(self, mock_completion):
        mock_completion.return_value = _completion_response("   ")

        result = LLMProcessor(api_key="test-key").process("Original text", "Fix")

        assert result.content == "Original text"

    @patch(COMPLETION)
    def test_process_empty_text(self, mock_completion):
        """Blank input never reaches the model."""
        processor = LLMProcessor(api_key="test-key")

        assert processor.process("", "Fix").content == ""
        assert processor.process("   ", "Fix").content == "   "
        mock_completion.assert_not_called()


class TestLLMCorrectionService:
    """Tests for mode handling in LLMCorrectionService."""

    def test_off_returns_text_unchanged(self):
        service = LLMCorrectionService(Settings())
        with patch(COMPLETION) as mock_completion:
            result = asyncio.run(service.correct("some text", TranscriptionProvider.OPENAI))
        assert result == "some text"
        mock_completion.assert_not_called()

    @patch(COMPLETION_COST, return_value=None)
    @patch(COMPLETION)
    def test_cloud_uses_correction_prompt_and_openai_key(self, mock_completion, _mock_cost):
        mock_completion.return_value = _completion_response("Some text.")
        settings = Settings(semantic_correction_mode=CorrectionMode.CLOUD)
        credentials = EnvironmentCredentialStore({("AudioWhisper", "OpenAI"): "sk-test"})
        service = LLMCorrectionService(settings, credentials)

        result = asyncio.run(service.correct("some text", TranscriptionProvider.OPENAI))

        assert result == "Some text."
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["messages"][0]["content"] == CORRECTION_PROMPT

    @patch(COMPLETION_COST, return_value=None)
    @patch(COMPLETION)
    def test_cloud_does_not_leak_key_to_other_vendor(self, mock_completion, _mock_cost):
        mock_completion.return_value = _completion_response("ok")
        settings = Settings(
            semantic_correction_mode=CorrectionMode.CLOUD,
            cloud_correction_model="gpt-4o-mini",
        )
        credentials = EnvironmentCredentialStore({("AudioWhisper", "Gemini"): "gm-test"})
        service = LLMCorrectionService(settings, credentials)

        asyncio.run(service.correct("text", TranscriptionProvider.GEMINI))

        assert "api_key" not in mock_completion.call_args.kwargs

    @pytest.mark.parametrize(
        "provider", [TranscriptionProvider.LOCAL, TranscriptionProvider.PARAKEET]
    )
    def test_cloud_skips_on_device_transcripts(self, provider):
        service = LLMCorrectionService(Settings(semantic_correction_mode=CorrectionMode.CLOUD))
        with patch(COMPLETION) as mock_completion:
            assert asyncio.run(service.correct("private words", provider)) == "private words"
        mock_completion.assert_not_called()

    def test_local_mlx_uses_injected_corrector(self):
        corrector = AsyncMock(return_value=" Corrected. ")
        settings = Settings(
            semantic_correction_mode=CorrectionMode.LOCAL_MLX,
            semantic_correction_model_repo="mlx-community/Qwen3-4B-4bit",
        )
        service = LLMCorrectionService(settings, local_corrector=corrector)

        result = asyncio.run(service.correct("corected", TranscriptionProvider.PARAKEET))

        assert result == "Corrected."
        corrector.assert_awaited_once_with("corected", "mlx-community/Qwen3-4B-4bit")

    def test_local_mlx_without_corrector_returns_text(self):
        service = LLMCorrectionService(Settings(semantic_correction_mode=CorrectionMode.LOCAL_MLX))
        assert asyncio.run(service.correct("abc", TranscriptionProvider.LOCAL)) == "abc"

    def test_local_mlx_failure_falls_back(self):
        corrector = AsyncMock(side_effect=RuntimeError("mlx crashed"))
        settings = Settings(semantic_correction_mode=CorrectionMode.LOCAL_MLX)
        service = LLMCorrectionService(settings, local_corrector=corrector)

        assert asyncio.run(service.correct("abc", TranscriptionProvider.LOCAL)) == "abc"

    @patch("audiowhisper.core.transcript_processor.llm_processor.logger")
    @patch(COMPLETION_COST, return_value=0.00042)
    @patch(COMPLETION)
    def test_call_settings_override_construction_snapshot(
        self, mock_completion, _mock_cost, mock_logger
    ):
        response = _completion_response("Hello there.")
        response.usage = MagicMock(prompt_tokens=10, completion_tokens=3, total_tokens=13)
        mock_completion.return_value = response
        service = LLMCorrectionService(Settings())
        call_settings = Settings(
            semantic_correction_mode=CorrectionMode.CLOUD,
            cloud_correction_model="gpt-4.1-mini",
        )

        result = asyncio.run(
            service.correct("hello there", TranscriptionProvider.OPENAI, call_settings)
        )

        assert result == "Hello there."
        assert mock_completion.call_args.kwargs["model"] == "gpt-4.1-mini"
        mock_logger.debug.assert_any_call(
            "Cloud correction with gpt-4.1-mini used 13 tokens ($0.000420)"
        )

    def test_call_settings_can_turn_correction_off(self):
        corrector = AsyncMock(return_value="changed")
        service = LLMCorrectionService(
            Settings(semantic_correction_mode=CorrectionMode.LOCAL_MLX),
            local_corrector=corrector,
        )

        result = asyncio.run(service.correct("abc", TranscriptionProvider.LOCAL, Settings()))

        assert result == "abc"
        corrector.assert_not_called()
