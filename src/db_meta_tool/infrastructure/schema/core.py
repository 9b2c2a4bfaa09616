"""Core schema types for DbMetaTool.

Read-only snapshots of the catalog objects the tool exports: domains, base
tables with their columns, and stored procedures with their parameters.
They are built per invocation from catalog rows and are never persisted; the
persisted form is the generated script text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

# Catalog names generated by the engine itself (system domains, implicit
# column fields such as RDB$123) start with this prefix.
SYSTEM_NAME_PREFIX = "RDB$"


class FieldType(IntEnum):
    """RDB$FIELD_TYPE codes recognized by the type mapper."""

    SHORT = 7
    LONG = 8
    FLOAT = 10
    TEXT = 14
    INT64 = 16
    DOUBLE = 27
    VARYING = 37


class FieldSubType(IntEnum):
    """RDB$FIELD_SUB_TYPE values for integral storage with a scale."""

    NUMERIC = 1
    DECIMAL = 2


class ParameterDirection(IntEnum):
    """RDB$PARAMETER_TYPE values."""

    INPUT = 0
    OUTPUT = 1


class ScriptCategory(str, Enum):
    """Script categories; the value is the subdirectory name."""

    DOMAINS = "domains"
    TABLES = "tables"
    PROCEDURES = "procedures"


# Domains before tables (columns may use domains), tables before procedures
# (bodies and signatures may use both).
PHASE_ORDER: Tuple[ScriptCategory, ...] = (
    ScriptCategory.DOMAINS,
    ScriptCategory.TABLES,
    ScriptCategory.PROCEDURES,
)


def is_system_name(name: str) -> bool:
    """Return True for engine-generated catalog names."""
    return name.upper().startswith(SYSTEM_NAME_PREFIX)


@dataclass(frozen=True)
class FieldDescriptor:
    """Raw RDB$FIELDS attributes that determine one SQL type."""

    type_code: int
    storage_length: int = 0
    scale: int = 0
    precision: Optional[int] = None
    character_length: Optional[int] = None
    subtype: Optional[int] = None


@dataclass(frozen=True)
class InlineType:
    """Type declared directly on the column or parameter."""

    descriptor: FieldDescriptor


@dataclass(frozen=True)
class DomainReference:
    """Type taken from a user-defined domain."""

    domain_name: str


TypeSource = Union[InlineType, DomainReference]


def type_source_for(field_source: str, descriptor: FieldDescriptor) -> TypeSource:
    """Classify a catalog field source as an inline type or a domain reference."""
    if is_system_name(field_source):
        return InlineType(descriptor)
    return DomainReference(field_source)


@dataclass(frozen=True)
class DomainDefinition:
    """A user-defined domain."""

    name: str
    descriptor: FieldDescriptor

    @property
    def sql_type(self) -> str:
        from .type_mapper import map_field_type

        return map_field_type(self.descriptor)


@dataclass(frozen=True)
class ColumnDefinition:
    """A single table column, in catalog position order."""

    name: str
    position: int
    type_source: TypeSource
    nullable: bool = True


@dataclass(frozen=True)
class TableDefinition:
    """A base table (views are never represented)."""

    name: str
    columns: Tuple[ColumnDefinition, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProcedureParameter:
    """A stored procedure input or output parameter."""

    name: str
    direction: ParameterDirection
    type_source: TypeSource
    number: int


@dataclass(frozen=True)
class ProcedureDefinition:
    """A stored procedure with its parameters split by direction."""

    name: str
    input_parameters: Tuple[ProcedureParameter, ...] = field(default_factory=tuple)
    output_parameters: Tuple[ProcedureParameter, ...] = field(default_factory=tuple)
    source: str = ""


__all__ = [
    "SYSTEM_NAME_PREFIX",
    "FieldType",
    "FieldSubType",
    "ParameterDirection",
    "ScriptCategory",
    "PHASE_ORDER",
    "is_system_name",
    "FieldDescriptor",
    "InlineType",
    "DomainReference",
    "TypeSource",
    "type_source_for",
    "DomainDefinition",
    "ColumnDefinition",
    "TableDefinition",
    "ProcedureParameter",
    "ProcedureDefinition",
]
