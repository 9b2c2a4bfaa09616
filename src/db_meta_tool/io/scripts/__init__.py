"""Definition script files: writing exported DDL and applying scripts."""

from .applier import (
    ApplyResult,
    ApplyState,
    ConnectionExecutor,
    ScriptApplier,
    StatementExecutor,
    list_scripts,
)
from .writer import ScriptWriter

__all__ = [
    "ApplyResult",
    "ApplyState",
    "ConnectionExecutor",
    "ScriptApplier",
    "StatementExecutor",
    "list_scripts",
    "ScriptWriter",
]
