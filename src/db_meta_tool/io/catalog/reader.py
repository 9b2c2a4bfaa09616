"""
Catalog Reader for Firebird system tables.

Reads user-defined domains, base tables and stored procedures from the RDB$
system tables and returns them as schema object snapshots. All queries are
read-only.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from db_meta_tool.infrastructure.schema import (
    ColumnDefinition,
    DomainDefinition,
    FieldDescriptor,
    ParameterDirection,
    ProcedureDefinition,
    ProcedureParameter,
    TableDefinition,
    is_system_name,
    type_source_for,
)
from db_meta_tool.utils.logging import get_logger

logger = get_logger(__name__)

DOMAINS_SQL = """
    SELECT
        RDB$FIELD_NAME,
        RDB$FIELD_TYPE,
        RDB$FIELD_LENGTH,
        RDB$FIELD_SCALE,
        RDB$FIELD_PRECISION,
        RDB$CHARACTER_LENGTH,
        RDB$FIELD_SUB_TYPE
    FROM RDB$FIELDS
    WHERE (RDB$SYSTEM_FLAG = 0 OR RDB$SYSTEM_FLAG IS NULL)
      AND RDB$FIELD_NAME NOT STARTING WITH 'RDB$'
    ORDER BY RDB$FIELD_NAME
"""

TABLES_SQL = """
    SELECT RDB$RELATION_NAME
    FROM RDB$RELATIONS
    WHERE (RDB$SYSTEM_FLAG = 0 OR RDB$SYSTEM_FLAG IS NULL)
      AND RDB$VIEW_BLR IS NULL
    ORDER BY RDB$RELATION_NAME
"""

COLUMNS_SQL = """
    SELECT
        rf.RDB$FIELD_NAME,
        rf.RDB$FIELD_POSITION,
        rf.RDB$FIELD_SOURCE,
        f.RDB$FIELD_TYPE,
        f.RDB$FIELD_LENGTH,
        f.RDB$FIELD_SCALE,
        f.RDB$FIELD_PRECISION,
        f.RDB$CHARACTER_LENGTH,
        f.RDB$FIELD_SUB_TYPE,
        rf.RDB$NULL_FLAG
    FROM RDB$RELATION_FIELDS rf
    JOIN RDB$FIELDS f ON rf.RDB$FIELD_SOURCE = f.RDB$FIELD_NAME
    WHERE rf.RDB$RELATION_NAME = :table_name
    ORDER BY rf.RDB$FIELD_POSITION
"""

PROCEDURES_SQL = """
    SELECT
        RDB$PROCEDURE_NAME,
        RDB$PROCEDURE_SOURCE
    FROM RDB$PROCEDURES
    WHERE (RDB$SYSTEM_FLAG = 0 OR RDB$SYSTEM_FLAG IS NULL)
    ORDER BY RDB$PROCEDURE_NAME
"""

PARAMETERS_SQL = """
    SELECT
        pp.RDB$PARAMETER_NAME,
        pp.RDB$PARAMETER_TYPE,
        pp.RDB$PARAMETER_NUMBER,
        pp.RDB$FIELD_SOURCE,
        f.RDB$FIELD_TYPE,
        f.RDB$FIELD_LENGTH,
        f.RDB$FIELD_SCALE,
        f.RDB$FIELD_PRECISION,
        f.RDB$CHARACTER_LENGTH,
        f.RDB$FIELD_SUB_TYPE
    FROM RDB$PROCEDURE_PARAMETERS pp
    JOIN RDB$FIELDS f ON pp.RDB$FIELD_SOURCE = f.RDB$FIELD_NAME
    WHERE pp.RDB$PROCEDURE_NAME = :procedure_name
    ORDER BY pp.RDB$PARAMETER_TYPE, pp.RDB$PARAMETER_NUMBER
"""


def _name(value: Optional[str]) -> str:
    """Catalog names are fixed-width CHAR columns padded with blanks."""
    return (value or "").strip()


def _text(value: Any) -> str:
    """Read a text BLOB; large BLOBs come back from the driver as readers.

    Bytes that are not valid UTF-8 become U+FFFD.
    """
    if value is None:
        return ""
    if hasattr(value, "read"):
        value = value.read()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _descriptor(row: Sequence[Any]) -> FieldDescriptor:
    """Build a descriptor from the six RDB$FIELDS columns, in query order."""
    type_code, length, scale, precision, char_length, subtype = row
    return FieldDescriptor(
        type_code=int(type_code) if type_code is not None else 0,
        storage_length=int(length or 0),
        scale=int(scale or 0),
        precision=_optional_int(precision),
        character_length=_optional_int(char_length),
        subtype=_optional_int(subtype),
    )


class CatalogReader:
    """
    Read schema objects from a Firebird database catalog.

    Usage:
        with open_connection(url) as conn:
            reader = CatalogReader(conn)
            for table in reader.read_tables():
                print(table.name, [c.name for c in table.columns])
    """

    def __init__(self, conn: Connection):
        """
        Initialize the reader with a database connection.

        Args:
            conn: SQLAlchemy connection object
        """
        self.conn = conn

    def read_domains(self) -> List[DomainDefinition]:
        """Return all user-defined domains, excluding system-prefixed names."""
        rows = self.conn.execute(sa.text(DOMAINS_SQL)).fetchall()

        domains: List[DomainDefinition] = []
        for row in rows:
            name = _name(row[0])
            if is_system_name(name):
                continue
            domains.append(DomainDefinition(name=name, descriptor=_descriptor(row[1:7])))

        logger.debug("catalog.domains_read", count=len(domains))
        return domains

    def read_table_names(self) -> List[str]:
        """Return the names of all user base tables (views excluded)."""
        rows = self.conn.execute(sa.text(TABLES_SQL)).fetchall()
        return [_name(row[0]) for row in rows]

    def read_columns(self, table_name: str) -> List[ColumnDefinition]:
        """Return the columns of a table ordered by their declared position."""
        rows = self.conn.execute(
            sa.text(COLUMNS_SQL), {"table_name": table_name}
        ).fetchall()

        columns: List[ColumnDefinition] = []
        for index, row in enumerate(rows):
            name = _name(row[0])
            position = _optional_int(row[1])
            field_source = _name(row[2])
            null_flag = row[9]
            columns.append(
                ColumnDefinition(
                    name=name,
                    position=index if position is None else position,
                    type_source=type_source_for(field_source, _descriptor(row[3:9])),
                    nullable=not (null_flag is not None and int(null_flag) == 1),
                )
            )
        return columns

    def read_tables(self) -> List[TableDefinition]:
        """Return every user base table with its ordered columns."""
        tables = [
            TableDefinition(name=name, columns=tuple(self.read_columns(name)))
            for name in self.read_table_names()
        ]
        logger.debug("catalog.tables_read", count=len(tables))
        return tables

    def read_parameters(self, procedure_name: str) -> List[ProcedureParameter]:
        """Return procedure parameters, inputs first, each by parameter number."""
        rows = self.conn.execute(
            sa.text(PARAMETERS_SQL), {"procedure_name": procedure_name}
        ).fetchall()

        parameters: List[ProcedureParameter] = []
        for row in rows:
            direction = (
                ParameterDirection.INPUT
                if int(row[1] or 0) == ParameterDirection.INPUT
                else ParameterDirection.OUTPUT
            )
            parameters.append(
                ProcedureParameter(
                    name=_name(row[0]),
                    direction=direction,
                    type_source=type_source_for(_name(row[3]), _descriptor(row[4:10])),
                    number=int(row[2] or 0),
                )
            )
        return parameters

    def read_procedures(self) -> List[ProcedureDefinition]:
        """Return every user stored procedure with its parameters and source."""
        rows = self.conn.execute(sa.text(PROCEDURES_SQL)).fetchall()

        procedures: List[ProcedureDefinition] = []
        for row in rows:
            name = _name(row[0])
            parameters = self.read_parameters(name)
            procedures.append(
                ProcedureDefinition(
                    name=name,
                    input_parameters=tuple(
                        p for p in parameters if p.direction == ParameterDirection.INPUT
                    ),
                    output_parameters=tuple(
                        p for p in parameters if p.direction == ParameterDirection.OUTPUT
                    ),
                    source=_text(row[1]),
                )
            )

        logger.debug("catalog.procedures_read", count=len(procedures))
        return procedures
