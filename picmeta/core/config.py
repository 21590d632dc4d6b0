"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from picmeta.models.prompt_config import GenerationConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    # App settings
    app_name: str = "PicMeta"
    debug: bool = False

    # Provider selection
    ai_provider: Literal["openai", "gemini"] = "openai"

    # OpenAI (chat completions with image_url parts)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_base_url: str = "https://api.openai.com/v1"

    # Google Gemini (generateContent with inline_data parts)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-pro"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_temperature: float = 0.1

    # Request limits
    request_timeout_seconds: float = 20.0
    filename_timeout_seconds: float = 15.0
    max_output_tokens: int = 150
    filename_max_output_tokens: int = 50
    max_filename_length: int = 80
    max_parallel_requests: int = 5

    # Prompts, context templates, fallback templates and copy suffixes
    generation: GenerationConfig = Field(default_factory=GenerationConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
