"""Application configuration module.

This module contains settings for the short-link service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

from typing import Optional
from enum import Enum
from pathlib import Path
import logging

from pydantic import Field, field_validator, model_validator, computed_field, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

from shortlinks.models.shortlink import HASH_COLUMN_LENGTH
from shortlinks.services import codec

# Set up basic logger for config module
logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "Shortlinks"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Collision-resistant short-link generation and resolution"

    # API Configuration
    BASE_URL: str = "http://localhost:8000"  # Stripped on shorten, prepended on resolve
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # Short-link generation
    SHORTLINK_SALT: str = "change_this_to_a_secure_random_string_in_production"
    SHORTLINK_HASH_ALGORITHM: str = "md5"  # Any fixed-length hashlib algorithm, or "base62"
    SHORTLINK_PREFERRED_HASH_LENGTH: int = Field(default=9, ge=1)
    SHORTLINK_MAX_HASH_LENGTH: int = Field(default=HASH_COLUMN_LENGTH, ge=1, le=HASH_COLUMN_LENGTH)
    SHORTLINK_MAX_CONFLICT_RETRIES: int = Field(default=3, ge=0)

    # Database settings
    DATABASE_URL: Optional[str] = None  # Full override, e.g. "postgresql+asyncpg://..."
    SQLITE_PATH: str = "shortlinks.db"
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "shortlinks"

    # Pool settings (ignored by SQLite)
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES_ON_STARTUP: bool = True

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = True

    # Validators
    @field_validator("SHORTLINK_HASH_ALGORITHM")
    def validate_hash_algorithm(cls, v: str) -> str:
        """Only fixed-length hashlib algorithms (or the base62 selector) are usable."""
        name = v.strip()
        if not codec.is_supported_algorithm(name):
            raise ValueError(f"Unsupported hash algorithm: {v}")
        return name

    @field_validator("BASE_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("SHORTLINK_SALT")
    def validate_salt(cls, v: str, info: ValidationInfo) -> str:
        default_value = "change_this_to_a_secure_random_string_in_production"
        env_value = info.data.get('ENVIRONMENT', EnvironmentType.DEVELOPMENT)

        if v == default_value and (env_value == EnvironmentType.PRODUCTION or str(env_value) == "production"):
            # Changing the salt later makes new digests diverge from stored hashes
            logger.warning("Using default SHORTLINK_SALT in production environment! Set a stable secret.")
        return v

    @model_validator(mode="after")
    def validate_hash_lengths(self) -> "Settings":
        if self.SHORTLINK_PREFERRED_HASH_LENGTH > self.SHORTLINK_MAX_HASH_LENGTH:
            raise ValueError(
                "SHORTLINK_PREFERRED_HASH_LENGTH cannot exceed SHORTLINK_MAX_HASH_LENGTH "
                f"({self.SHORTLINK_PREFERRED_HASH_LENGTH} > {self.SHORTLINK_MAX_HASH_LENGTH})"
            )
        return self

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.POSTGRES_SERVER:
            return (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"


# Create a singleton instance of the settings
settings = Settings()
