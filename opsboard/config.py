"""
Application configuration using Pydantic Settings
"""
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Application
    TIMEZONE: str = "UTC"  # calendar labels and restore history are rendered in this zone
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def get_timezone(self) -> ZoneInfo:
        """
        Display timezone as a ZoneInfo object
        """
        return ZoneInfo(self.TIMEZONE)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance (singleton)
    """
    return Settings()
