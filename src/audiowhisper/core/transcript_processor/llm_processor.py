import asyncio
import warnings
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import litellm
from litellm import completion, completion_cost

from ...utils.logger import get_logger
from ..interfaces import CorrectionService, CredentialStore
from ..providers import CorrectionMode, TranscriptionProvider
from ..settings import Settings
from ..settings.config import CREDENTIAL_SERVICE

logger = get_logger(__name__)

LocalCorrector = Callable[[str, str], Awaitable[str]]

CORRECTION_PROMPT = (
    "You fix speech-to-text transcripts. Correct misheard words, punctuation "
    "and capitalization. Keep the original language and meaning. Do not add, "
    "summarize or explain anything. Return only the corrected transcript."
)


@dataclass
class LLMResponse:
    content: str
    cost_usd: Optional[float] = None
    usage: Optional[dict] = (
        None  # token counts: prompt_tokens, completion_tokens, total_tokens
    )


class LLMProcessor:

    @staticmethod
    def format_model_name(model: str, provider: TranscriptionProvider) -> str:
        known_prefixes = (
            "openrouter/",
            "ollama/",
            "gemini/",
            "openai/",
            "anthropic/",
            "azure/",
        )

        if model.startswith(known_prefixes):
            return model

        if provider == TranscriptionProvider.GEMINI and model.startswith("gemini-"):
            return f"gemini/{model}"

        return model

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ):
        self.model = model
        self.api_key = api_key
        self.api_base = api_base

        model_info = litellm.model_cost.get(model, {})
        self._supports_system_messages = model_info.get(
            "supports_system_messages", True
        )

        if not self._supports_system_messages:
            logger.info(
                f"Model {model} does not support system messages (per model_cost)"
            )

    def process(self, text: str, prompt: str) -> LLMResponse:
        if not text or not text.strip():
            return LLMResponse(content=text)

        logger.info(f"Correcting transcript with {self.model} ({len(text)} chars)")

        try:
            if self._supports_system_messages:
                messages = [
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": text},
                ]
            else:
                merged_content = f"{prompt}\n\n{text}"
                messages = [{"role": "user", "content": merged_content}]
                logger.debug(f"Merged system prompt with user prompt for {self.model}")

            kwargs = {
                "model": self.model,
                "messages": messages,
            }

            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.api_base:
                kwargs["api_base"] = self.api_base

            response = completion(**kwargs)

            result_text = response.choices[0].message.content
            if not result_text or not result_text.strip():
                logger.warning("Correction model returned empty content, keeping original")
                return LLMResponse(content=text)

            try:
                with warnings.catch_warnings():
                    warnings.filterwarnings(
                        "ignore",
                        message="Pydantic serializer warnings",
                        category=UserWarning,
                    )
                    cost = completion_cost(completion_response=response)
            except Exception:
                cost = None

            usage = None
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                }

            logger.info(
                f"Correction complete: {len(text)} -> {len(result_text)} chars, cost=${cost:.6f}"
                if cost
                else f"Correction complete: {len(text)} -> {len(result_text)} chars"
            )

            return LLMResponse(content=result_text.strip(), cost_usd=cost, usage=usage)

        except Exception as e:
            logger.error(f"LLM correction failed: {e}", exc_info=True)
            return LLMResponse(content=text)


class LLMCorrectionService(CorrectionService):
    """
    Semantic correction step run after normalization.

    Modes:
        OFF: text is returned unchanged
        CLOUD: litellm completion, only for text produced by a cloud backend
        LOCAL_MLX: delegated to ``local_corrector(text, model_repo)`` if given

    The mode, model and repo come from the settings of the call being
    corrected; the snapshot given at construction is only a fallback.
    Correction never fails a transcription: every error falls back to the
    input text.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        credentials: Optional[CredentialStore] = None,
        local_corrector: Optional[LocalCorrector] = None,
    ):
        self._settings = settings or Settings()
        self._credentials = credentials
        self._local_corrector = local_corrector

    async def correct(
        self,
        text: str,
        provider: TranscriptionProvider,
        settings: Optional[Settings] = None,
    ) -> str:
        settings = settings or self._settings
        mode = settings.semantic_correction_mode

        if mode == CorrectionMode.OFF or not text.strip():
            return text

        if mode == CorrectionMode.LOCAL_MLX:
            return await self._correct_locally(text, settings.semantic_correction_model_repo)

        if provider.is_local:
            logger.info(
                f"Skipping cloud correction for on-device transcript from {provider.display_name}"
            )
            return text

        return await self._correct_in_cloud(text, provider, settings.cloud_correction_model)

    async def _correct_locally(self, text: str, repo: str) -> str:
        if self._local_corrector is None:
            logger.warning("Local correction requested but no local corrector configured")
            return text

        try:
            corrected = await self._local_corrector(text, repo)
        except Exception as e:
            logger.error(f"Local correction with {repo} failed: {e}", exc_info=True)
            return text
        return corrected.strip() if corrected and corrected.strip() else text

    async def _correct_in_cloud(
        self, text: str, provider: TranscriptionProvider, model: str
    ) -> str:
        model = LLMProcessor.format_model_name(model, provider)
        processor = LLMProcessor(model=model, api_key=self._api_key_for(model, provider))
        response = await asyncio.to_thread(processor.process, text, CORRECTION_PROMPT)

        if response.usage:
            logger.debug(
                f"Cloud correction with {model} used {response.usage['total_tokens']} tokens"
                + (f" (${response.cost_usd:.6f})" if response.cost_usd else "")
            )
        return response.content

    def _api_key_for(self, model: str, provider: TranscriptionProvider) -> Optional[str]:
        # Reuse the transcription key only when the correction model is served
        # by the same vendor; otherwise litellm falls back to its env vars.
        if self._credentials is None or not provider.credential_account:
            return None

        if provider == TranscriptionProvider.GEMINI:
            same_vendor = model.startswith("gemini/")
        else:
            same_vendor = "/" not in model or model.startswith("openai/")

        if not same_vendor:
            return None
        return self._credentials.get(CREDENTIAL_SERVICE, provider.credential_account)
