"""Map Firebird catalog field descriptors to SQL type syntax.

``map_field_type`` is total: any descriptor yields a type string. Codes outside
the recognized set (DATE, TIME, TIMESTAMP, BOOLEAN, BLOB, INT128, DECFLOAT, ...)
fall back to ``BLOB``. The fallback loses fidelity on round trips, so it is
logged at DEBUG level, but it is never an error.
"""

from __future__ import annotations

from typing import Dict

from db_meta_tool.utils.logging import get_logger

from .core import FieldDescriptor, FieldSubType, FieldType

logger = get_logger(__name__)

FALLBACK_TYPE = "BLOB"

_INTEGRAL_KEYWORDS: Dict[int, str] = {
    FieldType.SHORT: "SMALLINT",
    FieldType.LONG: "INTEGER",
    FieldType.INT64: "BIGINT",
}

# Precision implied by the storage width when RDB$FIELD_PRECISION is unset
_INTEGRAL_DEFAULT_PRECISION: Dict[int, int] = {
    FieldType.SHORT: 4,
    FieldType.LONG: 9,
    FieldType.INT64: 18,
}


def _effective_length(descriptor: FieldDescriptor) -> int:
    if descriptor.character_length is not None:
        return descriptor.character_length
    return descriptor.storage_length


def _exact_numeric(descriptor: FieldDescriptor) -> str:
    scale = -descriptor.scale
    if descriptor.precision is not None and descriptor.precision > 0:
        precision = descriptor.precision
    else:
        precision = _INTEGRAL_DEFAULT_PRECISION[descriptor.type_code]
    keyword = "DECIMAL" if descriptor.subtype == FieldSubType.DECIMAL else "NUMERIC"
    return f"{keyword}({precision},{scale})"


def map_field_type(descriptor: FieldDescriptor) -> str:
    """Convert a catalog field descriptor to its SQL type.

    Args:
        descriptor: RDB$FIELDS attributes of a domain, column or parameter

    Returns:
        SQL type such as ``VARCHAR(50)``, ``NUMERIC(9,2)`` or ``BIGINT``

    Examples:
        >>> map_field_type(FieldDescriptor(FieldType.LONG, 4, scale=-2))
        'NUMERIC(9,2)'
        >>> map_field_type(FieldDescriptor(FieldType.TEXT, 10))
        'CHAR(10)'
    """
    code = descriptor.type_code

    if code == FieldType.TEXT:
        return f"CHAR({_effective_length(descriptor)})"
    if code == FieldType.VARYING:
        return f"VARCHAR({_effective_length(descriptor)})"
    if code in _INTEGRAL_KEYWORDS:
        if descriptor.scale < 0:
            return _exact_numeric(descriptor)
        return _INTEGRAL_KEYWORDS[code]
    if code == FieldType.FLOAT:
        return "FLOAT"
    if code == FieldType.DOUBLE:
        return "DOUBLE PRECISION"

    logger.debug("type_mapper.fallback", type_code=code, fallback=FALLBACK_TYPE)
    return FALLBACK_TYPE


__all__ = ["FALLBACK_TYPE", "map_field_type"]
