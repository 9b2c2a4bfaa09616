"""
Firebird connection management.

Opens SQLAlchemy connections (sqlalchemy-firebird dialect on top of
firebird-driver) and creates new database files for build-db. Every failure
to reach or create a database surfaces as DatabaseConnectionError.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from firebird.driver import Error as FirebirdError
from firebird.driver import create_database as fb_create_database
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection
from sqlalchemy.exc import SQLAlchemyError

from db_meta_tool.config.settings import Settings
from db_meta_tool.utils.logging import get_logger, redact_url

from .exceptions import DatabaseConnectionError, UsageError

logger = get_logger(__name__)

DATABASE_FILE_SUFFIX = ".fdb"
DRIVER_NAME = "firebird+firebird"


def normalize_database_path(db_path: Union[str, Path]) -> Path:
    """
    Turn the --db-dir value into the database file path.

    Appends the ``.fdb`` suffix when it is missing. The path must name a
    directory that will hold the file.

    Examples:
        >>> normalize_database_path("/srv/db/app")
        PosixPath('/srv/db/app.fdb')
        >>> normalize_database_path("/srv/db/APP.FDB")
        PosixPath('/srv/db/APP.FDB')

    Raises:
        UsageError: If the path has no directory component
    """
    raw = str(db_path)
    if not raw.lower().endswith(DATABASE_FILE_SUFFIX):
        raw += DATABASE_FILE_SUFFIX

    if not os.path.dirname(raw):
        raise UsageError(f"Database path must include a directory: {raw}")

    return Path(raw).absolute()


def server_database_path(settings: Settings, database_path: Path) -> str:
    """Firebird DSN in ``host/port:path`` form."""
    return f"{settings.new_db_host}/{settings.new_db_port}:{database_path}"


def build_database_url(settings: Settings, database_path: Path) -> URL:
    """SQLAlchemy URL for a database created by build-db."""
    return URL.create(
        DRIVER_NAME,
        username=settings.new_db_user,
        password=settings.new_db_password or None,
        host=settings.new_db_host,
        port=settings.new_db_port,
        database=str(database_path),
        query={"charset": settings.new_db_charset},
    )


def create_database_file(settings: Settings, database_path: Path) -> None:
    """
    Create an empty database on the configured server.

    Args:
        settings: Provides server host/port and FB_NEW_DB_* credentials
        database_path: Absolute path of the new database file

    Raises:
        DatabaseConnectionError: If the server rejects the creation
    """
    dsn = server_database_path(settings, database_path)
    try:
        connection = fb_create_database(
            dsn,
            user=settings.new_db_user,
            password=settings.new_db_password,
        )
    except FirebirdError as e:
        raise DatabaseConnectionError(
            dsn, e, f"Failed to create database {database_path}: {e}"
        ) from e

    connection.close()
    logger.info("database.created", database=str(database_path))


@contextmanager
def open_connection(url: Union[str, URL]) -> Generator[Connection, None, None]:
    """
    Open a connection and release it, with its engine, on every exit path.

    Args:
        url: SQLAlchemy URL or connection string

    Yields:
        SQLAlchemy connection

    Raises:
        DatabaseConnectionError: If the URL is invalid or the database cannot
            be reached
    """
    target = redact_url(url if isinstance(url, str) else url.render_as_string())

    try:
        engine = create_engine(url)
    except SQLAlchemyError as e:
        raise DatabaseConnectionError(
            target, e, f"Invalid connection string {target}: {redact_url(str(e))}"
        ) from e

    try:
        connection = engine.connect()
    except SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseConnectionError(
            target, e, f"Failed to connect to database {target}: {redact_url(str(e))}"
        ) from e

    logger.info("database.connected", target=target)
    try:
        yield connection
    finally:
        connection.close()
        engine.dispose()
