"""
Settings management with JSON persistence.

Holds the preference snapshot handed to the transcription orchestrator.
Uses platformdirs for cross-platform directory resolution.
"""

import json
from pathlib import Path
from typing import Optional

from platformdirs import user_config_path, user_data_path
from pydantic import BaseModel, ConfigDict, field_validator

from ...utils.logger import get_logger
from ..providers import CorrectionMode, TranscriptionProvider
from .config import DEFAULT_CORRECTION_MODEL_REPO

logger = get_logger(__name__)

APP_NAME = "audiowhisper"


def get_config_dir() -> Path:
    return user_config_path(APP_NAME, ensure_exists=True)


def get_data_dir() -> Path:
    return user_data_path(APP_NAME, ensure_exists=True)


class Settings(BaseModel):
    model_config = ConfigDict(validate_assignment=False, use_enum_values=False)

    transcription_provider: TranscriptionProvider = TranscriptionProvider.OPENAI
    selected_whisper_model: Optional[str] = "base"

    openai_base_url: str = ""
    openai_model: str = "whisper-1"

    gemini_base_url: str = ""
    gemini_model: str = ""

    semantic_correction_mode: CorrectionMode = CorrectionMode.OFF
    semantic_correction_model_repo: str = DEFAULT_CORRECTION_MODEL_REPO
    cloud_correction_model: str = "gpt-4o-mini"

    python_path_override: Optional[str] = None

    @field_validator("openai_base_url", "gemini_base_url")
    @classmethod
    def base_url_is_http(cls, v):
        v = (v or "").strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("base URL must start with http:// or https://")
        return v

    @field_validator("semantic_correction_model_repo")
    @classmethod
    def repo_not_empty(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("semantic_correction_model_repo must be a non-empty string")
        return v

    @classmethod
    def load(cls) -> "Settings":
        config_file = get_config_dir() / "settings.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = json.load(f)

                # Filter to valid keys only
                valid_keys = cls.model_fields.keys()
                filtered_data = {k: v for k, v in data.items() if k in valid_keys}

                # Migration from the old boolean provider switch
                if "transcription_provider" not in filtered_data and "use_openai" in data:
                    filtered_data["transcription_provider"] = (
                        TranscriptionProvider.OPENAI
                        if data["use_openai"] is not False
                        else TranscriptionProvider.GEMINI
                    )
                    logger.info(
                        f"Migrated 'use_openai' to provider "
                        f"'{filtered_data['transcription_provider'].value}'"
                    )

                return cls._load_with_fallbacks(filtered_data)
            except (json.JSONDecodeError, TypeError, AttributeError) as e:
                logger.warning(
                    f"Could not load settings: {e}. Using defaults.", exc_info=True
                )
                return cls()

        return cls()

    @classmethod
    def _load_with_fallbacks(cls, data: dict) -> "Settings":
        """Load settings with field-level fallback to defaults on validation errors."""
        defaults = cls()
        result_data = {}

        for field_name in cls.model_fields:
            if field_name in data:
                try:
                    validated = cls.model_validate(
                        {**defaults.model_dump(), field_name: data[field_name]}
                    )
                    result_data[field_name] = getattr(validated, field_name)
                except Exception:
                    default_val = getattr(defaults, field_name)
                    logger.warning(
                        f"Invalid {field_name} {data[field_name]!r}, resetting to {default_val}"
                    )
                    result_data[field_name] = default_val
            else:
                result_data[field_name] = getattr(defaults, field_name)

        return cls.model_construct(**result_data)

    def save(self) -> None:
        config_file = get_config_dir() / "settings.json"

        data = self.model_dump(mode="json")

        with open(config_file, "w") as f:
            json.dump(data, f, indent=2)

    def reset_to_defaults(self) -> None:
        default = Settings()
        for key, value in default.model_dump().items():
            setattr(self, key, value)


_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.load()
    return _settings_instance
