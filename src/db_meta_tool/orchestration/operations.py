"""
Use-cases: build a database, export scripts, update a database.

Each use-case owns a single connection for its whole duration and releases it
on every exit path. Configuration arrives as arguments; nothing here reads the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Union

from sqlalchemy.engine import URL

from db_meta_tool.config.settings import Settings
from db_meta_tool.infrastructure.schema import (
    ScriptCategory,
    generate_domain_ddl,
    generate_procedure_ddl,
    generate_table_ddl,
)
from db_meta_tool.io.catalog import CatalogReader
from db_meta_tool.io.connectors.firebird import (
    build_database_url,
    create_database_file,
    normalize_database_path,
    open_connection,
)
from db_meta_tool.io.scripts import (
    ApplyResult,
    ConnectionExecutor,
    ScriptApplier,
    ScriptWriter,
)
from db_meta_tool.utils.logging import bind_context

# Connection strings are SQLAlchemy URLs in string or object form
ConnectionTarget = Union[str, URL]


@dataclass
class ExportSummary:
    """Number of scripts written per category."""

    output_dir: Path
    counts: Dict[ScriptCategory, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def apply_scripts(connection_target: ConnectionTarget, scripts_dir: Path) -> ApplyResult:
    """Apply domains, tables and procedures scripts over one connection.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
        ScriptExecutionError: On the first failing script
    """
    with open_connection(connection_target) as conn:
        result = ScriptApplier(ConnectionExecutor(conn)).apply(scripts_dir)
    result.raise_for_failure()
    return result


def build_database(
    db_path: Union[str, Path], scripts_dir: Union[str, Path], settings: Settings
) -> ApplyResult:
    """
    Create a new database file and populate it from a scripts directory.

    Args:
        db_path: Database file path; ``.fdb`` is appended when missing
        scripts_dir: Root holding ``domains/``, ``tables/``, ``procedures/``
        settings: Server location and FB_NEW_DB_* credentials

    Returns:
        ApplyResult of the three phases

    Raises:
        UsageError: If db_path has no directory component
        DatabaseConnectionError: If the database cannot be created or opened
        ScriptExecutionError: On the first failing script
    """
    database_path = normalize_database_path(db_path)
    log = bind_context(command="build-db", database=str(database_path))

    database_path.parent.mkdir(parents=True, exist_ok=True)
    create_database_file(settings, database_path)

    result = apply_scripts(build_database_url(settings, database_path), Path(scripts_dir))
    log.info("build.completed", executed=len(result.executed))
    return result


def update_database(
    connection_target: ConnectionTarget, scripts_dir: Union[str, Path]
) -> ApplyResult:
    """
    Apply a scripts directory to an existing database.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
        ScriptExecutionError: On the first failing script
    """
    log = bind_context(command="update-db")
    result = apply_scripts(connection_target, Path(scripts_dir))
    log.info("update.completed", executed=len(result.executed))
    return result


def export_scripts(
    connection_target: ConnectionTarget, output_dir: Union[str, Path]
) -> ExportSummary:
    """
    Export domains, tables and procedures of a database as script files.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    log = bind_context(command="export-scripts", output_dir=str(output_path))
    writer = ScriptWriter(output_path)
    summary = ExportSummary(output_dir=output_path)

    with open_connection(connection_target) as conn:
        reader = CatalogReader(conn)

        domains = reader.read_domains()
        writer.write_all(
            ScriptCategory.DOMAINS,
            ((d.name, generate_domain_ddl(d)) for d in domains),
        )
        summary.counts[ScriptCategory.DOMAINS] = len(domains)
        log.info("export.domains_written", count=len(domains))

        tables = reader.read_tables()
        writer.write_all(
            ScriptCategory.TABLES,
            ((t.name, generate_table_ddl(t)) for t in tables),
        )
        summary.counts[ScriptCategory.TABLES] = len(tables)
        log.info("export.tables_written", count=len(tables))

        procedures = reader.read_procedures()
        writer.write_all(
            ScriptCategory.PROCEDURES,
            ((p.name, generate_procedure_ddl(p)) for p in procedures),
        )
        summary.counts[ScriptCategory.PROCEDURES] = len(procedures)
        log.info("export.procedures_written", count=len(procedures))

    return summary
