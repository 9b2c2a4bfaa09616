"""Unit tests for the schema object model."""

import pytest

from db_meta_tool.infrastructure.schema import (
    PHASE_ORDER,
    DomainReference,
    FieldDescriptor,
    FieldType,
    InlineType,
    ScriptCategory,
    is_system_name,
    type_source_for,
)


@pytest.mark.unit
class TestTypeSourceClassification:
    def test_system_generated_field_source_is_inline(self) -> None:
        descriptor = FieldDescriptor(FieldType.LONG)
        assert type_source_for("RDB$123", descriptor) == InlineType(descriptor)

    def test_named_field_source_is_domain_reference(self) -> None:
        descriptor = FieldDescriptor(FieldType.LONG)
        assert type_source_for("D_ID", descriptor) == DomainReference("D_ID")

    @pytest.mark.parametrize("name", ["RDB$FIELD", "rdb$lower", "Rdb$Mixed"])
    def test_system_prefix_is_case_insensitive(self, name: str) -> None:
        assert is_system_name(name)

    def test_prefix_must_be_at_start(self) -> None:
        assert not is_system_name("MY_RDB$FIELD")


@pytest.mark.unit
def test_phase_order_is_domains_tables_procedures() -> None:
    assert [c.value for c in PHASE_ORDER] == ["domains", "tables", "procedures"]
    assert set(PHASE_ORDER) == set(ScriptCategory)
