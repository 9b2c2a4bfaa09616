"""
Command handlers for the DbMetaTool CLI.

Each handler receives parsed arguments, runs one use-case and prints the
user-facing result. Errors propagate to ``db_meta_tool.cli.__main__.main``,
which maps them to exit codes.
"""

from __future__ import annotations

import argparse

from db_meta_tool.config import get_settings, resolve_connection_string
from db_meta_tool.io.scripts import ApplyResult
from db_meta_tool.orchestration import build_database, export_scripts, update_database

EXIT_SUCCESS = 0


def _print_apply_result(result: ApplyResult) -> None:
    for category in result.skipped_phases:
        print(f"Missing folder: {category.value} (skipped)")
    for script in result.executed:
        print(f"Executed script: {script.name}")


def run_build_db(args: argparse.Namespace) -> int:
    """build-db --db-dir <path> --scripts-dir <path>"""
    result = build_database(args.db_dir, args.scripts_dir, get_settings())
    _print_apply_result(result)
    print("Database built successfully.")
    return EXIT_SUCCESS


def run_export_scripts(args: argparse.Namespace) -> int:
    """export-scripts [--connection-string <str>] --output-dir <path>"""
    connection_string = resolve_connection_string(args.connection_string)
    summary = export_scripts(connection_string, args.output_dir)
    for category, count in summary.counts.items():
        print(f"Exported {count} {category.value} to {summary.output_dir / category.value}")
    print("Scripts exported successfully.")
    return EXIT_SUCCESS


def run_update_db(args: argparse.Namespace) -> int:
    """update-db [--connection-string <str>] --scripts-dir <path>"""
    connection_string = resolve_connection_string(args.connection_string)
    result = update_database(connection_string, args.scripts_dir)
    _print_apply_result(result)
    print("Database updated successfully.")
    return EXIT_SUCCESS
