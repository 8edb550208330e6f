"""Configuration management using Pydantic Settings"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Starling API (all required and non-empty, no fallbacks)
    api_base: str = Field(..., min_length=1, alias="STARLING_API_BASE")
    oauth_url: str = Field(..., min_length=1, alias="STARLING_OAUTH_URL")
    client_id: str = Field(..., min_length=1, alias="STARLING_CLIENT_ID")
    client_secret: str = Field(..., min_length=1, alias="STARLING_CLIENT_SECRET")
    access_token: str = Field(..., min_length=1, alias="STARLING_ACCESS_TOKEN")
    refresh_token: str = Field(..., min_length=1, alias="STARLING_REFRESH_TOKEN")

    # Round-up
    default_currency: str = Field(default="GBP", alias="DEFAULT_CURRENCY")

    # Service
    service_name: str = Field(default="roundup-gateway", alias="SERVICE_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # HTTP Client
    http_timeout_seconds: float = Field(default=5.0, alias="HTTP_TIMEOUT_SECONDS")
    user_agent: str = Field(default="roundup-gateway/0.1.0", alias="USER_AGENT")


@lru_cache
def get_settings() -> Settings:
    """Load settings once; raises pydantic.ValidationError if a credential is missing or empty"""
    return Settings()
