"""Database connectors and the error types shared by the I/O layer."""

from .exceptions import (
    DatabaseConnectionError,
    DbMetaToolError,
    ScriptExecutionError,
    UsageError,
)

__all__ = [
    "DbMetaToolError",
    "UsageError",
    "DatabaseConnectionError",
    "ScriptExecutionError",
]
