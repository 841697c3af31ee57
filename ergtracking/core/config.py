"""Application configuration using pydantic-settings."""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "ergsecret"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="ergtracking", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    forwarded_allow_ips: str = Field(default="127.0.0.1", alias="FORWARDED_ALLOW_IPS")

    # Sessions
    session_secret: str = Field(default=DEFAULT_SESSION_SECRET, alias="SESSION_SECRET")
    session_cookie_name: str = Field(default="erg_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=True, alias="SESSION_COOKIE_SECURE")
    session_lifetime_days: int = Field(default=7, ge=1, alias="SESSION_LIFETIME_DAYS")

    @property
    def session_lifetime(self) -> timedelta:
        """Fixed lifetime of a session from the moment it is issued."""
        return timedelta(days=self.session_lifetime_days)

    # Discord OAuth2
    discord_client_id: Optional[str] = Field(default=None, alias="DISCORD_CLIENT_ID")
    discord_client_secret: Optional[str] = Field(default=None, alias="DISCORD_CLIENT_SECRET")
    discord_callback_url: Optional[str] = Field(default=None, alias="DISCORD_CALLBACK_URL")
    discord_api_base: str = Field(default="https://discord.com/api", alias="DISCORD_API_BASE")
    discord_timeout: float = Field(default=10.0, gt=0, alias="DISCORD_TIMEOUT")

    @property
    def discord_configured(self) -> bool:
        """Whether all OAuth credentials needed for login are present."""
        return bool(
            self.discord_client_id and self.discord_client_secret and self.discord_callback_url
        )

    # Webhook
    webhook_url: Optional[str] = Field(default=None, alias="WEBHOOK_URL")
    webhook_timeout: float = Field(default=5.0, gt=0, alias="WEBHOOK_TIMEOUT")
    webhook_background: bool = Field(default=False, alias="WEBHOOK_BACKGROUND")
    webhook_brand: str = Field(default="ERG", alias="WEBHOOK_BRAND")

    # Submissions
    submission_capacity: int = Field(default=200, ge=1, alias="SUBMISSION_CAPACITY")
    max_body_bytes: int = Field(default=1024 * 1024, ge=1, alias="MAX_BODY_BYTES")

    # Static assets
    static_dir: str = Field(default="public", alias="STATIC_DIR")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
