"""Configuration management for Alertstore."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a .env file in the working directory
load_dotenv(Path.cwd() / ".env")


class Config:
    """Application configuration."""

    # Database file used when no path is given
    DB_PATH: str = os.getenv("ALERTSTORE_DB_PATH", "~/.alertstore/alerts.db")

    # Logging
    LOG_LEVEL: str = os.getenv("ALERTSTORE_LOG_LEVEL", "WARNING").upper()


config = Config()


def get_default_db_path() -> Path:
    """Get the configured database path."""
    return Path(config.DB_PATH).expanduser()
