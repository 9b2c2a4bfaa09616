"""
Infrastructure Layer

Pure building blocks with no database or filesystem access.

Components:
- schema: catalog field descriptors, schema object model, type mapping and
  DDL generation

Usage:
    from db_meta_tool.infrastructure.schema import map_field_type, generate_table_ddl
"""

__all__: list[str] = []
