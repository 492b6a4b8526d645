"""Configuration management using Pydantic Settings"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # AI assessment service
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    gemini_model: str = "gemini-3-flash-preview"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    ai_temperature: float = 0.2

    # Service
    service_name: str = "loan-assessment"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # Demo mode keeps AI timing realistic when no key is configured
    demo_delay_seconds: float = 1.5


settings = Settings()


def get_api_key() -> str | None:
    """Read the AI service credential at call time (env may change after startup)"""
    return Settings().gemini_api_key or None
