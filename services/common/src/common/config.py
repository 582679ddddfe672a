"""Application-wide configuration management using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration shared across services.

    Environment variables mirror the compose setup and allow overrides per service.
    """

    model_config = SettingsConfigDict(env_file=".env", env_nested_delimiter="__", extra="allow")

    environment: str = "development"
    service_name: str = "listing-writer"
    log_level: str = "INFO"

    # HTTP surface
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    request_timeout_s: float = 60.0

    # Google Cloud Vision (label + text detection)
    google_vision_api_key: Optional[str] = None
    google_vision_endpoint: str = "https://vision.googleapis.com/v1/images:annotate"
    vision_confidence_threshold: float = 0.7
    vision_max_labels: int = 20

    # OpenAI chat completions
    openai_base_url: str = "https://api.openai.com"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 800

    # Ollama (local vision model)
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llava:latest"
    ollama_timeout_s: float = 300.0

    # Generation defaults
    default_backend: str = "ollama"
    default_output_format: str = "html"

    # Server-side image compression
    compression_threshold_bytes: int = 500 * 1024
    compression_max_width: int = 1920
    compression_max_height: int = 1080
    compression_quality: int = 80
    compression_retry_quality: int = 70


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache configuration for the current process."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
