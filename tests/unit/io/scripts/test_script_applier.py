"""Unit tests for ScriptApplier phase ordering and fail-fast behaviour."""

from __future__ import annotations

from pathlib import Path

import pytest

from db_meta_tool.infrastructure.schema import ScriptCategory
from db_meta_tool.io.connectors.exceptions import ScriptExecutionError
from db_meta_tool.io.scripts import ApplyState, ScriptApplier, list_scripts


@pytest.mark.unit
class TestPhaseOrdering:
    def test_domains_then_tables_then_procedures(
        self, make_scripts_tree, recording_executor
    ) -> None:
        # Names chosen so that alphabetical order across phases would differ
        root = make_scripts_tree(
            {
                "procedures": {"A_PROC.sql": "proc A"},
                "tables": {"B_TABLE.sql": "table B", "A_TABLE.sql": "table A"},
                "domains": {"Z_DOMAIN.sql": "domain Z"},
            }
        )

        result = ScriptApplier(recording_executor).apply(root)

        assert result.state == ApplyState.DONE
        assert result.succeeded
        assert recording_executor.statements == ["domain Z", "table A", "table B", "proc A"]
        assert [p.name for p in result.executed] == [
            "Z_DOMAIN.sql",
            "A_TABLE.sql",
            "B_TABLE.sql",
            "A_PROC.sql",
        ]

    def test_only_sql_files_are_applied(self, make_scripts_tree, recording_executor) -> None:
        root = make_scripts_tree(
            {"tables": {"T.sql": "table T", "README.txt": "notes", "U.SQL": "table U"}}
        )

        ScriptApplier(recording_executor).apply(root)

        assert recording_executor.statements == ["table T", "table U"]

    def test_missing_directories_are_skipped_not_failed(
        self, make_scripts_tree, recording_executor
    ) -> None:
        root = make_scripts_tree({"tables": {"T.sql": "table T"}})

        result = ScriptApplier(recording_executor).apply(root)

        assert result.state == ApplyState.DONE
        assert result.skipped_phases == [ScriptCategory.DOMAINS, ScriptCategory.PROCEDURES]
        assert recording_executor.statements == ["table T"]

    def test_blank_files_are_skipped(self, make_scripts_tree, recording_executor) -> None:
        root = make_scripts_tree({"domains": {"EMPTY.sql": "  \n\t", "D.sql": "domain D"}})

        result = ScriptApplier(recording_executor).apply(root)

        assert recording_executor.statements == ["domain D"]
        assert [p.name for p in result.skipped_files] == ["EMPTY.sql"]

    def test_byte_order_mark_is_not_sent_to_the_engine(
        self, tmp_path: Path, recording_executor
    ) -> None:
        domains = tmp_path / "domains"
        domains.mkdir()
        (domains / "D.sql").write_bytes(b"\xef\xbb\xbfCREATE DOMAIN D AS INTEGER;")

        ScriptApplier(recording_executor).apply(tmp_path)

        assert recording_executor.statements == ["CREATE DOMAIN D AS INTEGER;"]


@pytest.mark.unit
class TestFailFast:
    def test_table_failure_stops_before_procedures(
        self, make_scripts_tree, failing_executor
    ) -> None:
        executor = failing_executor(fail_on="BROKEN", message="Token unknown - line 1")
        root = make_scripts_tree(
            {
                "domains": {"D.sql": "domain D"},
                "tables": {"A.sql": "table A", "B.sql": "table BROKEN", "C.sql": "table C"},
                "procedures": {"P.sql": "proc P"},
            }
        )

        result = ScriptApplier(executor).apply(root)

        assert result.state == ApplyState.FAILED
        assert result.failed_phase == ScriptCategory.TABLES
        assert executor.statements == ["domain D", "table A"]
        assert [p.name for p in result.executed] == ["D.sql", "A.sql"]

        assert isinstance(result.error, ScriptExecutionError)
        assert result.error.script.name == "B.sql"
        assert result.error.phase == "tables"
        assert "B.sql" in str(result.error)
        assert "Token unknown - line 1" in str(result.error)

    def test_undecodable_table_script_fails_the_run_and_names_the_file(
        self, make_scripts_tree, recording_executor
    ) -> None:
        root = make_scripts_tree(
            {
                "tables": {"A.sql": "table A"},
                "procedures": {"P.sql": "proc P"},
            }
        )
        (root / "tables" / "LATIN1.sql").write_bytes(
            b"CREATE TABLE T (NAME VARCHAR(10) DEFAULT '\xe9')"
        )

        result = ScriptApplier(recording_executor).apply(root)

        assert result.state == ApplyState.FAILED
        assert result.failed_phase == ScriptCategory.TABLES
        assert recording_executor.statements == ["table A"]
        assert isinstance(result.error, ScriptExecutionError)
        assert result.error.script.name == "LATIN1.sql"
        assert "LATIN1.sql" in str(result.error)
        assert isinstance(result.error.original_error, UnicodeDecodeError)

    def test_raise_for_failure_reraises_recorded_error(
        self, make_scripts_tree, failing_executor
    ) -> None:
        root = make_scripts_tree({"domains": {"D.sql": "domain BROKEN"}})

        result = ScriptApplier(failing_executor(fail_on="BROKEN")).apply(root)

        with pytest.raises(ScriptExecutionError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.script.name == "D.sql"
        assert exc_info.value.to_dict()["phase"] == "domains"

    def test_raise_for_failure_is_noop_on_success(
        self, make_scripts_tree, recording_executor
    ) -> None:
        root = make_scripts_tree({"domains": {"D.sql": "domain D"}})
        ScriptApplier(recording_executor).apply(root).raise_for_failure()


@pytest.mark.unit
def test_list_scripts_sorts_by_file_name(tmp_path: Path) -> None:
    for name in ("b.sql", "a.sql", "c.sql"):
        (tmp_path / name).write_text("x", encoding="utf-8")
    (tmp_path / "nested.sql").mkdir()

    assert [p.name for p in list_scripts(tmp_path)] == ["a.sql", "b.sql", "c.sql"]
