"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys - Optional
    apple_music_developer_token: str | None = Field(
        None, description="Developer token (JWT) for the Apple Music API"
    )
    apple_music_user_token: str | None = Field(
        None, description="Music user token for personalized endpoints"
    )

    # Catalog API Configuration
    apple_music_api_base: str = Field(
        default="https://api.music.apple.com", description="Base URL of the catalog API"
    )
    default_region_code: str = Field(
        default="us", description="Region code used when no storefront is known"
    )
    catalog_search_limit: int = Field(
        default=10, description="Maximum results per bucket in a catalog search"
    )
    catalog_request_timeout: float = Field(
        default=10.0, description="HTTP timeout in seconds for catalog API calls"
    )

    @property
    def resolved_default_region_code(self) -> str:
        """Get the default region code, handling empty env var case."""
        code = self.default_region_code.strip().lower()
        return code or "us"

    # Application Configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to run the server on")
    log_level: str = Field(default="INFO", description="Logging level")

    # Feature Flags
    enable_telemetry: bool = Field(default=True, description="Enable PostHog telemetry")

    # PostHog Configuration
    posthog_api_key: str | None = Field(None, description="PostHog API key for telemetry")
    posthog_host: str = Field(default="https://us.i.posthog.com", description="PostHog host URL")

    # Sentry Configuration
    sentry_dsn: str | None = Field(None, description="Sentry DSN for error tracking")

    # Application Metadata
    app_name: str = Field(default="Catalog-Search-Service", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
