"""Unit tests for ScriptWriter."""

from pathlib import Path

import pytest

from db_meta_tool.infrastructure.schema import ScriptCategory
from db_meta_tool.io.scripts import ScriptWriter


@pytest.mark.unit
def test_write_creates_category_dir_and_named_file(tmp_path: Path) -> None:
    writer = ScriptWriter(tmp_path / "out")

    path = writer.write(ScriptCategory.TABLES, "CUSTOMERS", "CREATE TABLE CUSTOMERS (\n    ID INTEGER\n);")

    assert path == tmp_path / "out" / "tables" / "CUSTOMERS.sql"
    assert path.read_bytes() == b"CREATE TABLE CUSTOMERS (\n    ID INTEGER\n);"


@pytest.mark.unit
def test_write_is_utf8_without_bom(tmp_path: Path) -> None:
    writer = ScriptWriter(tmp_path)
    path = writer.write(ScriptCategory.DOMAINS, "D_NAZWA", "CREATE DOMAIN D_NAZWA AS VARCHAR(10); -- żółw")

    raw = path.read_bytes()
    assert not raw.startswith(b"\xef\xbb\xbf")
    assert raw.decode("utf-8").endswith("żółw")


@pytest.mark.unit
def test_write_all_creates_directory_even_when_empty(tmp_path: Path) -> None:
    writer = ScriptWriter(tmp_path)

    paths = writer.write_all(ScriptCategory.PROCEDURES, [])

    assert paths == []
    assert (tmp_path / "procedures").is_dir()


@pytest.mark.unit
def test_write_overwrites_existing_script(tmp_path: Path) -> None:
    writer = ScriptWriter(tmp_path)
    writer.write(ScriptCategory.DOMAINS, "D", "old")
    path = writer.write(ScriptCategory.DOMAINS, "D", "new")
    assert path.read_text(encoding="utf-8") == "new"
