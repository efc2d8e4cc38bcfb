"""Application settings and configuration.

This module defines all configuration options for the Phrase Studio service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Quota limits live here so that callers can never supply their own.
    """

    # Application metadata
    app_name: str = Field(default="Phrase Studio", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Listener
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Access control
    access_password: str = Field(default="family2024", alias="ACCESS_PASSWORD")
    session_token_capacity: int = Field(default=10_000, ge=2, alias="SESSION_TOKEN_CAPACITY")
    trust_forwarded_for: bool = Field(default=False, alias="TRUST_FORWARDED_FOR")

    # Usage quotas (free is lifetime per IP, premium is per token per day)
    free_usage_limit: int = Field(default=3, gt=0, alias="FREE_USAGE_LIMIT")
    premium_usage_limit: int = Field(default=100, gt=0, alias="PREMIUM_USAGE_LIMIT")
    rollover_enabled: bool = Field(default=True, alias="ROLLOVER_ENABLED")

    # Text generation provider
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "CLAUDE_API_KEY"),
    )
    generation_base_url: str = Field(
        default="https://api.anthropic.com",
        alias="GENERATION_BASE_URL",
    )
    generation_model: str = Field(
        default="claude-3-haiku-20240307",
        alias="GENERATION_MODEL",
    )
    generation_max_tokens: int = Field(default=1000, gt=0, alias="GENERATION_MAX_TOKENS")
    generation_api_version: str = Field(
        default="2023-06-01",
        alias="GENERATION_API_VERSION",
    )
    generation_timeout_seconds: float = Field(
        default=30.0,
        alias="GENERATION_TIMEOUT_SECONDS",
    )

    # CORS configuration for the browser wizard
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def generation_configured(self) -> bool:
        """Return True when an API key for the generation provider is present."""
        return bool(self.api_key)


settings = Settings()
