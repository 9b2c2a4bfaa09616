"""
Configuration management for DbMetaTool.

This module provides environment-based configuration using Pydantic BaseSettings.
Values are read from the process environment and from a ``.env`` file, using the
same keys the tool has always used (``CONNECTION_STRING``, ``FB_NEW_DB_USER``,
``FB_NEW_DB_PASSWORD``), so existing ``.env`` files keep working.

The core never reads these values on its own: entry points resolve a Settings
instance (or a plain connection string) and pass it down explicitly.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from db_meta_tool.io.connectors.exceptions import UsageError

logger = structlog.get_logger(__name__)

DEFAULT_ENV_FILE = Path.cwd() / ".env"
ENV_FILE_OVERRIDE = os.getenv("DBMETA_ENV_FILE")
if ENV_FILE_OVERRIDE:
    SETTINGS_ENV_FILE = Path(ENV_FILE_OVERRIDE).expanduser()
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields (environment variable in parentheses):
    - connection_string (CONNECTION_STRING): SQLAlchemy URL of an existing
      database, used by export-scripts and update-db when no
      --connection-string is given
    - new_db_user / new_db_password (FB_NEW_DB_USER / FB_NEW_DB_PASSWORD):
      credentials used by build-db to create and populate a new database
    - new_db_host / new_db_port (FB_NEW_DB_HOST / FB_NEW_DB_PORT): server that
      hosts databases created by build-db
    - new_db_charset (FB_NEW_DB_CHARSET): connection character set for build-db
    - LOG_LEVEL: logging level (uppercase)
    """

    connection_string: Optional[str] = Field(
        default=None,
        validation_alias="CONNECTION_STRING",
        description="SQLAlchemy URL of the database to export or update",
    )

    new_db_user: str = Field(
        default="SYSDBA",
        validation_alias="FB_NEW_DB_USER",
        description="User that creates and owns databases built by build-db",
    )
    new_db_password: str = Field(
        default="",
        validation_alias="FB_NEW_DB_PASSWORD",
        description="Password for FB_NEW_DB_USER",
    )
    new_db_host: str = Field(
        default="localhost",
        validation_alias="FB_NEW_DB_HOST",
        description="Firebird server host for build-db",
    )
    new_db_port: int = Field(
        default=3050,
        validation_alias="FB_NEW_DB_PORT",
        description="Firebird server port for build-db",
    )
    new_db_charset: str = Field(
        default="UTF8",
        validation_alias="FB_NEW_DB_CHARSET",
        description="Connection character set used by build-db",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    @field_validator("connection_string", mode="before")
    @classmethod
    def _blank_connection_string_is_unset(cls, value: object) -> object:
        """Treat an empty or whitespace-only CONNECTION_STRING as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def _uppercase_log_level(cls, value: str) -> str:
        return value.upper()

    model_config = SettingsConfigDict(
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()


def resolve_connection_string(
    explicit: Optional[str], settings: Optional[Settings] = None
) -> str:
    """
    Pick the connection string for commands that work on an existing database.

    Priority order:
    1) the value passed on the command line
    2) CONNECTION_STRING from the environment or .env file

    Args:
        explicit: Value of --connection-string, or None when the flag is absent
        settings: Settings to fall back to (defaults to get_settings())

    Returns:
        The connection string to use

    Raises:
        UsageError: If neither source provides a value
    """
    if explicit is not None and explicit.strip():
        return explicit

    settings = settings or get_settings()
    if settings.connection_string:
        logger.debug("configuration.connection_string_from_env")
        return settings.connection_string

    raise UsageError(
        "Missing --connection-string argument and no CONNECTION_STRING value "
        "in the environment or .env file"
    )
