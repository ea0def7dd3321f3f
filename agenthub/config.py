"""
Configuration management for AgentHub.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Database
    database_url: str = ""

    # HTTP
    cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Rate limits (slowapi syntax)
    rate_limit_enabled: bool = True
    submission_rate_limit: str = "10/minute"
    lookup_rate_limit: str = "20/minute"

    # Email delivery (Resend-compatible HTTP API); empty url logs instead of sending
    email_provider_url: str = ""
    email_api_key: str = ""
    email_from: str = "AgentHub <noreply@agenthub.com>"
    email_timeout: float = 10.0
    portal_url: str = "http://localhost:3000"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
