"""Error types raised while building, exporting or updating a database.

Every failure that reaches the command line derives from DbMetaToolError, so
the CLI can map usage problems and runtime failures to distinct exit codes.
"""

from pathlib import Path
from typing import Dict, Optional, Union


class DbMetaToolError(Exception):
    """Base class for all errors raised by DbMetaTool."""


class UsageError(DbMetaToolError):
    """Invalid invocation: missing argument or unresolved configuration.

    Raised before any side effect is attempted.
    """


class DatabaseConnectionError(DbMetaToolError):
    """Failure to open an existing database or create a new one."""

    def __init__(self, target: str, original_error: Exception, message: str):
        self.target = target
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> Dict[str, str]:
        """Convert to structured dict for logging."""
        return {
            "error_type": "DatabaseConnectionError",
            "target": self.target,
            "message": str(self),
            "original_error_type": type(self.original_error).__name__,
            "original_error_message": str(self.original_error),
        }


class ScriptExecutionError(DbMetaToolError):
    """A definition script failed to execute against the target database."""

    def __init__(
        self,
        phase: str,
        script: Union[str, Path],
        original_error: Exception,
        message: Optional[str] = None,
    ):
        self.phase = phase
        self.script = Path(script)
        self.original_error = original_error
        super().__init__(message or str(original_error))

    def __str__(self) -> str:
        return f"Script {self.script.name} failed ({self.phase}): {self.args[0]}"

    def to_dict(self) -> Dict[str, str]:
        """Convert to structured dict for logging."""
        return {
            "error_type": "ScriptExecutionError",
            "phase": self.phase,
            "script": self.script.name,
            "message": str(self),
            "original_error_type": type(self.original_error).__name__,
            "original_error_message": str(self.original_error),
        }
