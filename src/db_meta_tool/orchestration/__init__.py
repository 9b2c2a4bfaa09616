"""Build, export and update use-cases."""

from .operations import (
    ExportSummary,
    apply_scripts,
    build_database,
    export_scripts,
    update_database,
)

__all__ = [
    "ExportSummary",
    "apply_scripts",
    "build_database",
    "export_scripts",
    "update_database",
]
