"""
Application configuration management using Pydantic settings.
Handles environment variables and configuration validation.
"""

import os
from typing import Optional
from pydantic import validator
from pydantic_settings import BaseSettings
from pathlib import Path
from loguru import logger

from .labels import APP_NAME, DELETED_MEMBER_NAME


LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Main application settings."""

    # Application Settings
    app_name: str = APP_NAME
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "data/pastoral.log"

    # Record snapshot used by the console entry point
    snapshot_path: str = "data/pastoral_snapshot.json"

    # Presentation fallbacks
    deleted_member_label: str = DELETED_MEMBER_NAME

    # Follow-up queue
    urgent_window_days: int = 3
    urgent_limit: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = False

    @validator('log_level')
    def validate_log_level(cls, v):
        level = (v or "").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @validator('urgent_window_days')
    def validate_urgent_window(cls, v):
        if v < 0:
            raise ValueError("urgent_window_days must be zero or positive")
        return v

    @validator('urgent_limit')
    def validate_urgent_limit(cls, v):
        if v < 1:
            raise ValueError("urgent_limit must be at least 1")
        return v

    @validator('log_file')
    def ensure_log_directory_exists(cls, v):
        """Ensure the log directory exists."""
        log_path = Path(v)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return str(log_path)


# Global settings instance
settings = None

def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global settings
    if settings is None:
        try:
            settings = Settings()
        except Exception as e:
            logger.warning(f"Could not load settings from environment: {e}")
            logger.warning("Using default settings")
            settings = Settings.model_construct()
    return settings

def initialize_settings(env_file: Optional[str] = None) -> Settings:
    """Initialize settings with optional custom env file."""
    global settings
    if env_file and os.path.exists(env_file):
        settings = Settings(_env_file=env_file)
    else:
        settings = Settings()
    return settings
