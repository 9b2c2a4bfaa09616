"""Schema object model, catalog type mapping and DDL generation.

This package has no database or filesystem dependencies; the I/O layer feeds
it catalog rows and persists its output.
"""

from .core import (
    PHASE_ORDER,
    SYSTEM_NAME_PREFIX,
    ColumnDefinition,
    DomainDefinition,
    DomainReference,
    FieldDescriptor,
    FieldSubType,
    FieldType,
    InlineType,
    ParameterDirection,
    ProcedureDefinition,
    ProcedureParameter,
    ScriptCategory,
    TableDefinition,
    TypeSource,
    is_system_name,
    type_source_for,
)
from .ddl_generator import (
    generate_domain_ddl,
    generate_procedure_ddl,
    generate_table_ddl,
    resolve_type,
)
from .type_mapper import FALLBACK_TYPE, map_field_type

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
    "FALLBACK_TYPE",
    "map_field_type",
    "resolve_type",
    "generate_domain_ddl",
    "generate_table_ddl",
    "generate_procedure_ddl",
]
