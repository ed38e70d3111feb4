"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Ledger Core"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./ledger_core.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

    # Accounting defaults, applied when a tenant sets up accounting
    # without choosing its own values.
    DEFAULT_ENTRY_NUMBER_PREFIX: str = os.getenv(
        "DEFAULT_ENTRY_NUMBER_PREFIX", "JE-"
    )
    DEFAULT_BASE_CURRENCY: str = os.getenv("DEFAULT_BASE_CURRENCY", "EUR")
    NUMBER_ALLOCATION_MAX_ATTEMPTS: int = int(
        os.getenv("NUMBER_ALLOCATION_MAX_ATTEMPTS", "5")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()
