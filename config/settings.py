"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/talent.db")
    APP_CONFIG_PATH: str = Field(default="app_config.json")
    PROMPTS_PATH: str = Field(default="config/prompts.yaml")

    QUESTION_SECONDS: float = Field(default=60, gt=0)
    SIMULATED_PROCESSING_SECONDS: float = Field(default=2.0, ge=0)

    PREFERRED_MIME_TYPE: str = "video/webm;codecs=vp8"
    FALLBACK_MIME_TYPE: str = "video/webm"
    VIDEO_BITS_PER_SECOND: int = 450_000
    AUDIO_BITS_PER_SECOND: int = 64_000

    DEFAULT_TRANSCRIPT_WEIGHT: int = Field(default=85, ge=0, le=100)
    DEFAULT_VIDEO_WEIGHT: int = Field(default=15, ge=0, le=100)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
