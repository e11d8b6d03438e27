"""Configuration management for GamerMatch."""

from typing import Any, List

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./gamermatch.db"

    # Redis Configuration
    REDIS_URL: str | None = None

    # Sentry Configuration
    SENTRY_DSN: str | None = None

    # Application Configuration
    APP_NAME: str = "GamerMatch"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    DEBUG: bool = Field(default=None, validate_default=True)
    ADMIN_IDS: str | None = None

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Compatibility scoring weights
    PLATFORM_WEIGHT: int = 2
    GENRE_WEIGHT: int = 1
    PLAYSTYLE_WEIGHT: int = 3
    VOICE_CHAT_WEIGHT: int = 2

    # Discovery
    DISCOVERY_PAGE_SIZE: int = 20
    MAX_DISCOVERY_PAGE_SIZE: int = 100

    # Rate limits
    MAX_SWIPES_PER_HOUR: int = 100
    MAX_REPORTS_PER_DAY: int = 10

    # Account lifecycle
    ACCOUNT_DELETION_GRACE_DAYS: int = 30

    # Cache
    PROFILE_CACHE_TTL: int = 3600

    @field_validator("DEBUG", mode="before")
    @classmethod
    def set_debug(cls, v: Any, info: ValidationInfo) -> bool:
        """Parse DEBUG from the environment; when unset, enable it only in development."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str) and v.strip():
            return v.strip().lower() in {"true", "1", "yes"}
        return bool(info.data.get("ENVIRONMENT", "").lower() == "development")

    def get_admin_ids(self) -> List[str]:
        """Return the configured admin profile IDs."""
        if not self.ADMIN_IDS:
            return []
        return [admin_id.strip() for admin_id in self.ADMIN_IDS.split(",") if admin_id.strip()]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore")


# Create a global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the settings instance."""
    return settings
