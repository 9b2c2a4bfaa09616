"""Pytest configuration and shared fixtures.

The test run must not pick up a developer's .env: DBMETA_ENV_FILE is pointed
at a path that does not exist before any db_meta_tool module is imported.
"""

from __future__ import annotations

import os

os.environ["DBMETA_ENV_FILE"] = os.path.join(os.path.dirname(__file__), ".env.test-absent")

from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from sqlalchemy.exc import ProgrammingError

from db_meta_tool.config.settings import get_settings

ScriptTree = Dict[str, Dict[str, str]]


class RecordingExecutor:
    """StatementExecutor double that records statements and can fail on demand."""

    def __init__(self, fail_on: Optional[str] = None, message: str = "Token unknown"):
        self.statements: List[str] = []
        self.fail_on = fail_on
        self.message = message

    def execute(self, sql: str) -> None:
        if self.fail_on is not None and self.fail_on in sql:
            raise ProgrammingError(sql, {}, Exception(self.message))
        self.statements.append(sql)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from the caller's environment and cached settings."""
    for name in (
        "CONNECTION_STRING",
        "FB_NEW_DB_USER",
        "FB_NEW_DB_PASSWORD",
        "FB_NEW_DB_HOST",
        "FB_NEW_DB_PORT",
        "FB_NEW_DB_CHARSET",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def failing_executor() -> Callable[..., RecordingExecutor]:
    """Factory for an executor that fails on statements containing a marker."""
    return RecordingExecutor


@pytest.fixture
def make_scripts_tree(tmp_path: Path) -> Callable[[ScriptTree], Path]:
    """Create ``<tmp>/scripts/<category>/<file>`` from a nested dict."""

    def _make(tree: ScriptTree) -> Path:
        root = tmp_path / "scripts"
        root.mkdir(exist_ok=True)
        for category, files in tree.items():
            category_dir = root / category
            category_dir.mkdir(exist_ok=True)
            for filename, content in files.items():
                (category_dir / filename).write_text(content, encoding="utf-8")
        return root

    return _make
