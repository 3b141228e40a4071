"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    elevenlabs_api_key: str | None = None
    provider_base_url: str = "https://api.elevenlabs.io"
    provider_model_id: str = "scribe_v1"
    provider_timeout_seconds: float = Field(default=600.0, gt=0)

    async_duration_threshold_seconds: float = Field(default=600.0, ge=0)
    webhook_url: str | None = None
    webhook_secret: str | None = None

    upload_dir: str = "uploads"
    ffprobe_binary: str = "ffprobe"
    job_retention_seconds: float | None = Field(default=None, gt=0)
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="SCRIBEHOOK_", env_file=".env", extra="ignore")

    @property
    def async_callback_configured(self) -> bool:
        return bool(self.webhook_url)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
