"""Unit tests for Table, StoreState, Migration and mutation entities."""

from __future__ import annotations

import pytest

from tablevault.domain.entities import (
    DeleteMutation,
    DropAllDataMutation,
    InsertMutation,
    Migration,
    MigrationApplyMutation,
    MutationKind,
    RenameColumnMutation,
    StoreState,
    Table,
)
from tablevault.domain.value_objects import MigrationId


@pytest.mark.unit
class TestTable:
    """Tests for the Table entity."""

    def test_round_trip_dict(self) -> None:
        """to_dict/from_dict preserve columns and records in order."""
        table = Table(
            columns=["name", "tags"],
            records=[{"name": "a", "tags": ["x"]}, {"name": "b", "tags": None}],
        )
        assert Table.from_dict(table.to_dict()) == table

    def test_from_dict_defaults(self) -> None:
        """Missing keys default to empty lists."""
        assert Table.from_dict({}) == Table()

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "table",
            {"columns": "name"},
            {"columns": [1, 2]},
            {"columns": [], "records": {}},
            {"columns": [], "records": ["row"]},
        ],
    )
    def test_from_dict_rejects_bad_layout(self, payload: object) -> None:
        with pytest.raises(ValueError):
            Table.from_dict(payload)

    def test_copy_is_deep(self) -> None:
        """Editing a copy leaves the original untouched."""
        table = Table(columns=["data"], records=[{"data": {"k": [1]}}])
        clone = table.copy()
        clone.records[0]["data"]["k"].append(2)
        clone.columns.append("extra")

        assert table.records[0]["data"]["k"] == [1]
        assert table.columns == ["data"]

    def test_record_count(self) -> None:
        assert Table(columns=["a"], records=[{"a": 1}, {"a": 2}]).record_count == 2


@pytest.mark.unit
class TestStoreState:
    """Tests for the StoreState aggregate."""

    def test_empty(self) -> None:
        state = StoreState.empty()
        assert len(state) == 0
        assert state.to_dict() == {}

    def test_round_trip_preserves_table_order(self) -> None:
        state = StoreState(
            tables={
                "b": Table(columns=["x"]),
                "a": Table(columns=["y"], records=[{"y": 1}]),
            }
        )
        restored = StoreState.from_dict(state.to_dict())

        assert restored == state
        assert restored.table_names == ["b", "a"]

    def test_from_dict_rejects_non_mapping(self) -> None:
        with pytest.raises(ValueError, match="must be an object"):
            StoreState.from_dict(["users"])

    def test_contains_and_get(self) -> None:
        state = StoreState(tables={"users": Table()})
        assert "users" in state
        assert state.get("users") == Table()
        assert state.get("missing") is None


@pytest.mark.unit
class TestMigration:
    """Tests for the Migration entity."""

    def test_to_record(self) -> None:
        migration = Migration(id=MigrationId("001"), description="init", timestamp=5)
        assert migration.to_record() == {
            "id": "001",
            "description": "init",
            "timestamp": 5,
            "applied": False,
        }

    def test_from_record_treats_null_applied_as_pending(self) -> None:
        """Pending rows are stored with applied=null."""
        row = {"id": "001", "description": "init", "timestamp": 5, "applied": None}
        assert Migration.from_record(row).applied is False

    def test_from_record_applied(self) -> None:
        row = {"id": "001", "description": None, "timestamp": None, "applied": True}
        migration = Migration.from_record(row)

        assert migration.applied is True
        assert migration.description == ""
        assert migration.timestamp == 0

    def test_mark_applied_returns_copy(self) -> None:
        migration = Migration(id=MigrationId("001"))
        applied = migration.mark_applied()

        assert applied.applied is True
        assert migration.applied is False
        assert applied.id == migration.id

    def test_default_timestamp_is_milliseconds(self) -> None:
        assert Migration(id=MigrationId("x")).timestamp > 10**12

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            Migration(id=MigrationId(""))


@pytest.mark.unit
class TestMutations:
    """Tests for mutation descriptors."""

    def test_kinds(self) -> None:
        assert InsertMutation(table="t").kind is MutationKind.INSERT
        assert DeleteMutation(table="t").kind is MutationKind.DELETE
        assert DropAllDataMutation().kind is MutationKind.DROP_ALL_DATA
        assert (
            RenameColumnMutation(table="t", column="a", new_name="b").kind
            is MutationKind.RENAME_COLUMN
        )

    def test_target(self) -> None:
        assert InsertMutation(table="users").target == "users"
        assert DropAllDataMutation().target is None

    def test_migration_apply_ignores_body_in_equality(self) -> None:
        migration = Migration(id=MigrationId("1"), timestamp=5)
        first = MigrationApplyMutation(migration=migration, body=lambda: None)
        second = MigrationApplyMutation(migration=migration, body=lambda: None)
        assert first == second
        assert first.migration_id == "1"
        assert first.kind is MutationKind.MIGRATION_APPLY
