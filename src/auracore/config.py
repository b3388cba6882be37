"""Configuration settings for the AuraCore MCP server.

This module provides Pydantic Settings for configuration management.
All settings are loaded from environment variables with the AURACORE_ prefix
and fall back to a per-user data directory.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from auracore.constants import DEFAULT_DATA_DIR, DEFAULT_DB_FILENAME

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class AuracoreSettings(BaseSettings):
    """Configuration settings for the AuraCore MCP server.

    Attributes:
        data_dir: Directory holding the store file
        db_filename: Name of the store file inside data_dir
        log_level: Logging level
    """

    model_config = SettingsConfigDict(
        env_prefix="AURACORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra env vars without error
    )

    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory for the store file")
    db_filename: str = Field(default=DEFAULT_DB_FILENAME, description="Store file name")
    log_level: LogLevel = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def get_db_path(self) -> Path:
        """Get the store file path, expanding user home."""
        return (self.data_dir.expanduser() / self.db_filename).resolve()
