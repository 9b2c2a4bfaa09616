"""Configuration management for DbMetaTool.

Settings are loaded from environment variables and the ``.env`` file with
validation using Pydantic BaseSettings.

Usage:
    >>> from db_meta_tool.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.new_db_user)
"""

from db_meta_tool.config.settings import (
    Settings,
    get_settings,
    resolve_connection_string,
)

__all__ = [
    "Settings",
    "get_settings",
    "resolve_connection_string",
]
