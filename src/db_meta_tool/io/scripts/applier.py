"""
Apply definition scripts to a database in dependency order.

Scripts are applied phase by phase: every ``domains/*.sql`` first, then
``tables/*.sql``, then ``procedures/*.sql``. Application is fail-fast: the
first failing script stops the run, and scripts already applied stay applied
(each one is committed on its own).

State sequence::

    PENDING -> DOMAINS -> TABLES -> PROCEDURES -> DONE
                  \\          \\          \\
                   +----------+----------+--> FAILED
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union, runtime_checkable

from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from db_meta_tool.infrastructure.schema import PHASE_ORDER, ScriptCategory
from db_meta_tool.io.connectors.exceptions import ScriptExecutionError
from db_meta_tool.utils.logging import get_logger

logger = get_logger(__name__)


class ApplyState(str, Enum):
    """Progress of a script application run."""

    PENDING = "pending"
    DOMAINS = "domains"
    TABLES = "tables"
    PROCEDURES = "procedures"
    DONE = "done"
    FAILED = "failed"


_PHASE_STATES: Dict[ScriptCategory, ApplyState] = {
    ScriptCategory.DOMAINS: ApplyState.DOMAINS,
    ScriptCategory.TABLES: ApplyState.TABLES,
    ScriptCategory.PROCEDURES: ApplyState.PROCEDURES,
}


@runtime_checkable
class StatementExecutor(Protocol):
    """Runs one SQL statement (or engine-side batch) against the target."""

    def execute(self, sql: str) -> None:
        ...


class ConnectionExecutor:
    """
    Execute scripts on a SQLAlchemy connection, committing after each one.

    Script text goes to the driver unchanged: procedure bodies contain
    ``:variable`` references that must not be treated as bind parameters.
    """

    def __init__(self, conn: Connection):
        self.conn = conn

    def execute(self, sql: str) -> None:
        self.conn.exec_driver_sql(sql)
        self.conn.commit()


@dataclass
class ApplyResult:
    """Outcome of applying a scripts directory."""

    state: ApplyState = ApplyState.PENDING
    executed: List[Path] = field(default_factory=list)
    skipped_files: List[Path] = field(default_factory=list)
    skipped_phases: List[ScriptCategory] = field(default_factory=list)
    failed_phase: Optional[ScriptCategory] = None
    error: Optional[ScriptExecutionError] = None

    @property
    def succeeded(self) -> bool:
        return self.state == ApplyState.DONE

    def raise_for_failure(self) -> None:
        """Re-raise the recorded script error, if any."""
        if self.error is not None:
            raise self.error


def list_scripts(directory: Path) -> List[Path]:
    """Return the ``.sql`` files of a directory sorted by file name."""
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".sql"),
        key=lambda p: p.name,
    )


def _engine_message(error: Exception) -> str:
    """Prefer the driver's own message over SQLAlchemy's wrapped rendering.

    Also used for read failures (unreadable file, invalid UTF-8).
    """
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class ScriptApplier:
    """
    Apply a scripts tree (``domains/``, ``tables/``, ``procedures/``) in order.

    Usage:
        with open_connection(url) as conn:
            result = ScriptApplier(ConnectionExecutor(conn)).apply(scripts_dir)
            result.raise_for_failure()
    """

    def __init__(self, executor: StatementExecutor):
        self.executor = executor

    def apply(self, scripts_root: Union[str, Path]) -> ApplyResult:
        """Run all phases; stop at the first failing script.

        Returns:
            ApplyResult in state DONE, or FAILED with the error recorded
        """
        root = Path(scripts_root)
        result = ApplyResult()

        for category in PHASE_ORDER:
            result.state = _PHASE_STATES[category]
            if not self._apply_phase(root / category.value, category, result):
                result.state = ApplyState.FAILED
                result.failed_phase = category
                return result

        result.state = ApplyState.DONE
        logger.info(
            "scripts.applied",
            executed=len(result.executed),
            skipped_files=len(result.skipped_files),
            skipped_phases=[c.value for c in result.skipped_phases],
        )
        return result

    def _apply_phase(
        self, directory: Path, category: ScriptCategory, result: ApplyResult
    ) -> bool:
        if not directory.is_dir():
            logger.warning(
                "scripts.phase_skipped", phase=category.value, directory=str(directory)
            )
            result.skipped_phases.append(category)
            return True

        for script in list_scripts(directory):
            try:
                sql = script.read_text(encoding="utf-8-sig")
                if not sql.strip():
                    result.skipped_files.append(script)
                    continue
                self.executor.execute(sql)
            except (OSError, UnicodeDecodeError, SQLAlchemyError) as e:
                error = ScriptExecutionError(
                    category.value, script, e, message=_engine_message(e)
                )
                logger.error("scripts.failed", **error.to_dict())
                result.error = error
                return False

            result.executed.append(script)
            logger.info("scripts.executed", phase=category.value, script=script.name)

        return True
