"""Configuration management using Pydantic Settings."""

import logging
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """hostbridge settings loaded from HOSTBRIDGE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOSTBRIDGE_",
        extra="ignore",
    )

    # Conversion
    max_depth: int = Field(default=256, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Apply the configured log level to the hostbridge logger.

    A basic handler is only installed when the root logger has none, so an
    embedding application's logging setup always wins.
    """
    settings = settings or get_settings()
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger("hostbridge")
    logger.setLevel(settings.log_level)
    return logger
