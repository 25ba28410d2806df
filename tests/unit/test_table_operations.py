"""Unit tests for in-memory table operations."""

from __future__ import annotations

import pytest

from tablevault.domain.entities import StoreState, Table
from tablevault.domain.services import table_operations as ops
from tablevault.ports import (
    ColumnAlreadyExistsError,
    ColumnNotFoundError,
    TableAlreadyExistsError,
    TableNotFoundError,
)


@pytest.fixture
def state() -> StoreState:
    """A store with one populated 'users' table."""
    return StoreState(
        tables={
            "users": Table(
                columns=["name", "email"],
                records=[
                    {"name": "John", "email": "j@x.com"},
                    {"name": "Jane", "email": "jane@x.com"},
                ],
            )
        }
    )


@pytest.mark.unit
class TestTableDDL:
    """Tests for table create/delete/rename."""

    def test_create_table(self) -> None:
        state = StoreState.empty()
        ops.create_table(state, "users", ["name"])

        assert state.get("users") == Table(columns=["name"], records=[])

    def test_create_table_without_columns(self) -> None:
        state = StoreState.empty()
        ops.create_table(state, "empty")

        assert state.get("empty") == Table()

    def test_create_existing_table_raises(self, state: StoreState) -> None:
        with pytest.raises(TableAlreadyExistsError, match='Table "users" already exists.'):
            ops.create_table(state, "users", ["x"])

    def test_create_table_duplicate_columns(self) -> None:
        with pytest.raises(ValueError, match="Duplicate column"):
            ops.create_table(StoreState.empty(), "t", ["a", "a"])

    def test_create_if_not_exists_keeps_existing(self, state: StoreState) -> None:
        assert ops.create_table_if_not_exists(state, "users", ["other"]) is False
        assert state.tables["users"].columns == ["name", "email"]
        assert state.tables["users"].record_count == 2

    def test_create_if_not_exists_creates(self) -> None:
        state = StoreState.empty()
        assert ops.create_table_if_not_exists(state, "t", ["a"]) is True
        assert "t" in state

    def test_delete_table(self, state: StoreState) -> None:
        ops.delete_table(state, "users")
        assert len(state) == 0

    def test_delete_missing_table_raises(self) -> None:
        with pytest.raises(TableNotFoundError, match='Table "ghost" does not exist.'):
            ops.delete_table(StoreState.empty(), "ghost")

    def test_delete_if_exists(self, state: StoreState) -> None:
        assert ops.delete_table_if_exists(state, "ghost") is False
        assert ops.delete_table_if_exists(state, "users") is True
        assert len(state) == 0

    def test_rename_table_keeps_contents(self, state: StoreState) -> None:
        before = state.tables["users"].copy()
        ops.rename_table(state, "users", "people")

        assert "users" not in state
        assert state.tables["people"] == before

    def test_rename_table_errors(self, state: StoreState) -> None:
        ops.create_table(state, "people", [])
        with pytest.raises(TableNotFoundError):
            ops.rename_table(state, "ghost", "other")
        with pytest.raises(TableAlreadyExistsError):
            ops.rename_table(state, "users", "people")


@pytest.mark.unit
class TestColumnDDL:
    """Tests for column add/delete/rename."""

    def test_add_column_backfills_default(self, state: StoreState) -> None:
        ops.add_column(state, "users", "age", 18)

        table = state.tables["users"]
        assert table.columns == ["name", "email", "age"]
        assert all(r["age"] == 18 for r in table.records)

    def test_add_column_default_none(self, state: StoreState) -> None:
        ops.add_column(state, "users", "age")
        assert all(r["age"] is None for r in state.tables["users"].records)

    def test_add_column_default_is_copied_per_record(self, state: StoreState) -> None:
        ops.add_column(state, "users", "tags", [])
        records = state.tables["users"].records
        records[0]["tags"].append("x")

        assert records[1]["tags"] == []

    def test_add_existing_column_raises(self, state: StoreState) -> None:
        with pytest.raises(
            ColumnAlreadyExistsError, match='Column "name" already exists in table "users".'
        ):
            ops.add_column(state, "users", "name")

    def test_add_column_missing_table(self) -> None:
        with pytest.raises(TableNotFoundError):
            ops.add_column(StoreState.empty(), "ghost", "c")

    def test_delete_column(self, state: StoreState) -> None:
        ops.delete_column(state, "users", "email")

        table = state.tables["users"]
        assert table.columns == ["name"]
        assert table.records == [{"name": "John"}, {"name": "Jane"}]

    def test_delete_missing_column_raises(self, state: StoreState) -> None:
        with pytest.raises(
            ColumnNotFoundError, match='Column "age" does not exist in table "users".'
        ):
            ops.delete_column(state, "users", "age")

    def test_rename_column_keeps_position(self, state: StoreState) -> None:
        ops.rename_column(state, "users", "name", "full_name")

        table = state.tables["users"]
        assert table.columns == ["full_name", "email"]
        assert table.records[0] == {"full_name": "John", "email": "j@x.com"}

    def test_rename_column_errors(self, state: StoreState) -> None:
        with pytest.raises(ColumnNotFoundError):
            ops.rename_column(state, "users", "age", "years")
        with pytest.raises(ColumnAlreadyExistsError):
            ops.rename_column(state, "users", "name", "email")


@pytest.mark.unit
class TestRecords:
    """Tests for record insert/update/delete/select."""

    def test_insert_normalizes_to_schema(self, state: StoreState) -> None:
        row = ops.insert_record(state, "users", {"name": "Bob", "extra": 1})

        assert row == {"name": "Bob", "email": None}
        assert state.tables["users"].records[-1] == row

    def test_insert_turns_falsy_into_none(self, state: StoreState) -> None:
        row = ops.insert_record(state, "users", {"name": "", "email": 0})
        assert row == {"name": None, "email": None}

    def test_insert_keeps_empty_containers(self) -> None:
        state = StoreState.empty()
        ops.create_table(state, "t", ["items", "meta"])
        row = ops.insert_record(state, "t", {"items": [], "meta": {}})

        assert row == {"items": [], "meta": {}}

    def test_insert_copies_caller_data(self) -> None:
        state = StoreState.empty()
        ops.create_table(state, "t", ["items"])
        data = {"items": [1]}
        ops.insert_record(state, "t", data)
        data["items"].append(2)

        assert state.tables["t"].records[0]["items"] == [1]

    def test_insert_missing_table(self) -> None:
        with pytest.raises(TableNotFoundError):
            ops.insert_record(StoreState.empty(), "ghost", {})

    def test_update_matching_records(self, state: StoreState) -> None:
        count = ops.update_records(state, "users", {"name": "John"}, {"email": "new@x.com"})

        assert count == 1
        assert state.tables["users"].records[0]["email"] == "new@x.com"
        assert state.tables["users"].records[1]["email"] == "jane@x.com"

    def test_update_ignores_unknown_columns(self, state: StoreState) -> None:
        ops.update_records(state, "users", {"name": "John"}, {"age": 5})
        assert "age" not in state.tables["users"].records[0]

    def test_update_predicate_column(self, state: StoreState) -> None:
        """Writing the matched column does not stop the rest of the write."""
        count = ops.update_records(
            state, "users", {"name": "John"}, {"name": "Johnny", "email": "jj@x.com"}
        )

        assert count == 1
        assert state.tables["users"].records[0] == {"name": "Johnny", "email": "jj@x.com"}

    def test_update_keeps_falsy_values(self, state: StoreState) -> None:
        ops.update_records(state, "users", {"name": "John"}, {"email": ""})
        assert state.tables["users"].records[0]["email"] == ""

    def test_update_no_match(self, state: StoreState) -> None:
        assert ops.update_records(state, "users", {"name": "Nobody"}, {"email": "x"}) == 0

    def test_delete_records(self, state: StoreState) -> None:
        assert ops.delete_records(state, "users", {"name": "John"}) == 1
        assert state.tables["users"].records == [{"name": "Jane", "email": "jane@x.com"}]

    def test_delete_all_with_empty_query(self, state: StoreState) -> None:
        assert ops.delete_records(state, "users", {}) == 2
        assert state.tables["users"].records == []

    def test_select_returns_copies(self, state: StoreState) -> None:
        rows = ops.select_records(state, "users", {"name": "John"})
        rows[0]["email"] = "changed"

        assert state.tables["users"].records[0]["email"] == "j@x.com"

    def test_select_missing_table(self) -> None:
        with pytest.raises(TableNotFoundError):
            ops.select_records(StoreState.empty(), "ghost", None)

    def test_drop_all_keeps_schemas(self, state: StoreState) -> None:
        ops.create_table(state, "empty", ["x"])
        ops.drop_all_records(state)

        assert state.tables["users"].columns == ["name", "email"]
        assert state.tables["users"].records == []
        assert "empty" in state
