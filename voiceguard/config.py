"""
Settings for the voice detection API and the scenario suite.

Values come from the environment (prefix VOICEGUARD_) or a local .env file.
GEMINI_API_KEY is read without the prefix so the same key works for other tools.
"""
from functools import lru_cache
from typing import Any, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from voiceguard.schemas import SupportedLanguage

APP_NAME = "VoiceGuard AI"
APP_DESCRIPTION = "Advanced AI voice detection system utilizing Gemini forensic analysis."


class Settings(BaseSettings):
    # Shared secret expected in the x-api-key header
    API_KEY: str = Field(
        "sk_test_123456789",
        description="Static API key accepted by the voice detection endpoint",
    )
    SUPPORTED_LANGUAGES: Tuple[str, ...] = Field(
        tuple(lang.value for lang in SupportedLanguage),
        description="Closed set of language tags accepted in requests",
    )
    API_ENDPOINT: str = Field(
        "https://your-domain.com/api/voice-detection",
        description="Public endpoint URL, used for display and logging only",
    )

    CLASSIFIER: str = Field(
        "gemini",
        description="Classification backend: 'gemini' or 'stub'",
    )
    GEMINI_API_KEY: str = Field(
        "",
        validation_alias=AliasChoices("GEMINI_API_KEY", "VOICEGUARD_GEMINI_API_KEY"),
        description="API key for the Gemini generateContent endpoint",
    )
    GEMINI_MODEL: str = Field("gemini-3-pro-preview")
    GEMINI_BASE_URL: str = Field("https://generativelanguage.googleapis.com/v1beta")
    GEMINI_TIMEOUT_SECONDS: float = Field(
        120.0,
        description="HTTP timeout for a single Gemini call (seconds)",
    )

    SCENARIO_DELAY_SECONDS: float = Field(
        0.5,
        description="Pause before each scenario so progress can be followed live",
    )
    LOG_LEVEL: str = Field("INFO")

    model_config = SettingsConfigDict(
        env_prefix="VOICEGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("GEMINI_API_KEY", mode="before")
    @classmethod
    def strip_api_key(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @field_validator("CLASSIFIER")
    @classmethod
    def check_classifier(cls, v: str) -> str:
        v = v.lower()
        if v not in ("gemini", "stub"):
            raise ValueError("CLASSIFIER must be 'gemini' or 'stub'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
