"""DDL SQL generation for exported schema objects.

One statement per object: ``CREATE DOMAIN`` for domains, ``CREATE TABLE`` for
base tables and ``CREATE OR ALTER PROCEDURE`` for stored procedures, so that a
procedure script applies whether or not the procedure already exists.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from .core import (
    ColumnDefinition,
    DomainDefinition,
    DomainReference,
    InlineType,
    ProcedureDefinition,
    ProcedureParameter,
    TableDefinition,
    TypeSource,
)
from .type_mapper import map_field_type

INDENT = "    "

_LEADING_AS = re.compile(r"^AS\b\s*", re.IGNORECASE)


def resolve_type(type_source: TypeSource) -> str:
    """Render the type of a column or parameter.

    Inline types are expanded through the type mapper; domain references are
    emitted by name so the domain's own definition stays authoritative.
    """
    if isinstance(type_source, DomainReference):
        return type_source.domain_name
    if isinstance(type_source, InlineType):
        return map_field_type(type_source.descriptor)
    raise TypeError(f"Unsupported type source: {type_source!r}")


def generate_domain_ddl(domain: DomainDefinition) -> str:
    """Generate the CREATE DOMAIN statement."""
    return f"CREATE DOMAIN {domain.name} AS {map_field_type(domain.descriptor)};"


def _column_line(column: ColumnDefinition) -> str:
    line = f"{INDENT}{column.name} {resolve_type(column.type_source)}"
    if not column.nullable:
        line += " NOT NULL"
    return line


def generate_table_ddl(table: TableDefinition) -> str:
    """Generate the CREATE TABLE statement, one column per line.

    Columns are emitted in the order given, which the catalog reader fixes to
    RDB$FIELD_POSITION.
    """
    lines = [_column_line(column) for column in table.columns]
    return f"CREATE TABLE {table.name} (\n" + ",\n".join(lines) + "\n);"


def _parameter_block(parameters: Sequence[ProcedureParameter]) -> str:
    return ",\n".join(
        f"{INDENT}{parameter.name} {resolve_type(parameter.type_source)}"
        for parameter in parameters
    )


def _procedure_body(source: str) -> List[str]:
    # The header already ends with AS
    body = _LEADING_AS.sub("", (source or "").lstrip(), count=1)
    if not body.strip():
        return ["BEGIN", "END"]
    return [body]


def generate_procedure_ddl(procedure: ProcedureDefinition) -> str:
    """Generate the CREATE OR ALTER PROCEDURE statement.

    The input block is omitted without input parameters and the RETURNS block
    without output parameters. A blank stored body becomes ``BEGIN``/``END``.
    """
    lines: List[str] = [f"CREATE OR ALTER PROCEDURE {procedure.name}"]

    if procedure.input_parameters:
        lines.append("(")
        lines.append(_parameter_block(procedure.input_parameters))
        lines.append(")")

    if procedure.output_parameters:
        lines.append("RETURNS (")
        lines.append(_parameter_block(procedure.output_parameters))
        lines.append(")")

    lines.append("")
    lines.append("AS")
    lines.extend(_procedure_body(procedure.source))

    return "\n".join(lines) + "\n"


__all__ = [
    "resolve_type",
    "generate_domain_ddl",
    "generate_table_ddl",
    "generate_procedure_ddl",
]
